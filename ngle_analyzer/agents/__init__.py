"""
Agent module exports.

Provides the text completion agents (Gemini, OpenAI, Anthropic), the factory
that initializes them from configuration, and the sentence analyzer that
requests and validates syntactic trees.
"""

from .base_agent import BaseLLMAgent
from .agent_factory import AgentFactory
from .errors import (
    AnalyzerError,
    ConfigurationError,
    FailureKind,
    InvalidCredentialError,
    NetworkUnreachableError,
    RetriesExhaustedError,
    ServiceCallError,
)
from .response_parser import ParseOutcome, SyntaxTreeParser, strip_code_fence, validate
from .sentence_analyzer import RetryPolicy, SentenceAnalyzer

__all__ = [
    "BaseLLMAgent",
    "AgentFactory",
    "AnalyzerError",
    "ConfigurationError",
    "FailureKind",
    "InvalidCredentialError",
    "NetworkUnreachableError",
    "RetriesExhaustedError",
    "ServiceCallError",
    "ParseOutcome",
    "SyntaxTreeParser",
    "strip_code_fence",
    "validate",
    "RetryPolicy",
    "SentenceAnalyzer",
]
