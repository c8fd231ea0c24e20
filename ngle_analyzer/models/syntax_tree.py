"""
syntax_tree.py

Defines the Pydantic models for the syntactic analysis tree returned by the
language model.

A `SentenceAnalysis` is the root: the echoed sentence, its grammatical
classification and an ordered list of top-level constituents. Each
`SyntacticElement` covers a substring of the sentence, carries a free-form
NGLE label and may have ordered children.

Validation is strict and all-or-nothing: `text` and `label` must be real
strings at every depth and `children`, when present, must be a list.
Serialisation uses the wire names (`fullSentence`).
"""

from typing import Iterator, List, Optional

from pydantic import BaseModel, Field, StrictStr

_CLOSING_MARKS = (".", ",", ";", ":", "!", "?", "…", ")", "]", "»")
_OPENING_MARKS = ("¿", "¡", "(", "[", "«")


class SyntacticElement(BaseModel):
    """A node of the syntactic tree. Terminal nodes have no children."""

    text: StrictStr = Field(..., description="Verbatim fragment of the sentence")
    label: StrictStr = Field(..., description="NGLE grammatical tag, e.g. 'SN Sujeto'")
    children: Optional[List["SyntacticElement"]] = Field(
        None, description="Direct constituents, in sentence order"
    )

    @property
    def is_terminal(self) -> bool:
        return not self.children

    def iter_nodes(self) -> Iterator["SyntacticElement"]:
        """Yields this node and all its descendants in pre-order."""
        yield self
        for child in self.children or []:
            yield from child.iter_nodes()


class SentenceAnalysis(BaseModel):
    """
    Root of a validated analysis.

    Attributes:
        full_sentence (str): The analysed sentence (wire name `fullSentence`).
        classification (str): Free-text classification, e.g.
            "Oración Simple, Enunciativa Afirmativa, Predicativa".
        structure (List[SyntacticElement]): Top-level constituents in order.
    """

    full_sentence: StrictStr = Field(..., alias="fullSentence")
    classification: StrictStr
    structure: List[SyntacticElement]

    def iter_nodes(self) -> Iterator[SyntacticElement]:
        for element in self.structure:
            yield from element.iter_nodes()

    def terminal_text(self) -> str:
        """
        Joins the text of every terminal node, left to right.

        Closing punctuation attaches to the preceding word and opening marks
        (¿ ¡ « and opening brackets) to the following one, so
        `["Llueve", "."]` gives "Llueve." and `["¿", "Llueve", "?"]` gives "¿Llueve?".
        """
        text = ""
        for node in self.iter_nodes():
            if not node.is_terminal or not node.text:
                continue
            if text and not text.endswith(_OPENING_MARKS) and not node.text.startswith(_CLOSING_MARKS):
                text += " "
            text += node.text
        return text

    def to_wire(self) -> dict:
        """Dumps the tree with wire names, omitting children that were never set."""
        return self.model_dump(by_alias=True, exclude_unset=True)


SyntacticElement.model_rebuild()
