from .syntax_tree import SentenceAnalysis, SyntacticElement

__all__ = ["SentenceAnalysis", "SyntacticElement"]
