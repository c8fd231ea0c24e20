"""
response_parser.py

Turns the raw text returned by the language model into a validated
`SentenceAnalysis`, or rejects it.

Steps:
    - Trim surrounding whitespace.
    - Strip a wrapping Markdown code fence (```json ... ``` or ``` ... ```).
    - Parse the body as JSON.
    - Validate the parsed value against the recursive Pydantic models in
      `ngle_analyzer.models.syntax_tree`.

Malformed input never raises: `parse_detailed` returns a tagged
`ParseOutcome` and `parse` returns `None`, logging the offending text or
object either way.
"""

import json
import re
import reprlib
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from ngle_analyzer.models.syntax_tree import SentenceAnalysis
from ngle_analyzer.utils.logger import get_logger
from ngle_analyzer.utils.metrics import metrics_tracker

logger = get_logger()

# Opening fence, optional language tag, body, optional newline, closing fence.
# Nothing may precede the opening fence or follow the closing one.
_FENCE_RE = re.compile(
    r"^```[ \t]*(?:json(?!\w)|[\w+.-]+[ \t]*(?=\r?\n))?\s*(.*?)\r?\n?\s*```$",
    re.IGNORECASE | re.DOTALL,
)

REASON_INVALID_JSON = "invalid_json"
REASON_SCHEMA_MISMATCH = "schema_mismatch"

_MAX_LOGGED_CHARS = 2000

# Bounded repr for rejected payloads; depth and size are capped
_payload_repr = reprlib.Repr()
_payload_repr.maxlevel = 12
_payload_repr.maxlist = 40
_payload_repr.maxdict = 40
_payload_repr.maxstring = 200
_payload_repr.maxother = 200


def strip_code_fence(text: str) -> str:
    """
    Removes a code fence wrapping the whole text, if there is one.

    Args:
        text (str): Raw model output.

    Returns:
        str: The trimmed fence body, or the trimmed input when it is not fenced.
    """
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match and match.group(1):
        return match.group(1).strip()
    return stripped


@dataclass(frozen=True)
class ParseOutcome:
    """
    Result of parsing one reply.

    Exactly one of `analysis` or `reason` is set.

    Attributes:
        analysis (Optional[SentenceAnalysis]): The validated tree.
        reason (Optional[str]): `invalid_json` or `schema_mismatch`.
        detail (Optional[str]): Human-readable description of the rejection.
        payload (Any): The text (for invalid JSON) or parsed object that was rejected.
    """

    analysis: Optional[SentenceAnalysis] = None
    reason: Optional[str] = None
    detail: Optional[str] = None
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None


class SyntaxTreeParser:
    """Validates model replies against the `SentenceAnalysis` schema."""

    def parse_detailed(self, raw: str) -> ParseOutcome:
        json_str = strip_code_fence(raw or "")

        # ValueError also covers JSONDecodeError and over-long integer literals
        try:
            parsed = json.loads(json_str)
        except (ValueError, RecursionError) as e:
            return ParseOutcome(
                reason=REASON_INVALID_JSON, detail=str(e), payload=json_str
            )

        try:
            analysis = SentenceAnalysis.model_validate(parsed)
        except (ValidationError, RecursionError) as e:
            return ParseOutcome(
                reason=REASON_SCHEMA_MISMATCH, detail=str(e), payload=parsed
            )

        return ParseOutcome(analysis=analysis)

    def parse(self, raw: str) -> Optional[SentenceAnalysis]:
        """
        Parses and validates a raw reply.

        Args:
            raw (str): Text returned by the language model.

        Returns:
            Optional[SentenceAnalysis]: The validated tree, or None if the text is
            not JSON or does not match the expected structure.
        """
        outcome = self.parse_detailed(raw)
        if outcome.ok:
            return outcome.analysis

        metrics_tracker.increment_validation_failures()
        if outcome.reason == REASON_INVALID_JSON:
            logger.error(f"Failed to parse JSON response: {outcome.detail}")
            logger.error(
                "Problematic JSON string that failed to parse: "
                f"{outcome.payload[:_MAX_LOGGED_CHARS]}"
            )
        else:
            logger.error(
                "Parsed JSON does not match expected SentenceAnalysis structure: "
                f"{_payload_repr.repr(outcome.payload)}. Details: {outcome.detail}"
            )
        return None


_default_parser = SyntaxTreeParser()


def validate(raw: str) -> Optional[SentenceAnalysis]:
    """Module-level shortcut for `SyntaxTreeParser().parse(raw)`."""
    return _default_parser.parse(raw)
