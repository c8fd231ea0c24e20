"""
sentence_analyzer.py

Defines the SentenceAnalyzer class, which drives one "analyze this sentence"
operation against the configured text completion service.

It orchestrates the process of:
    - Loading the NGLE analysis prompt template from a YAML file.
    - Filling the template with the literal sentence.
    - Calling the agent with a bounded retry policy and exponential backoff
      for transient failures (network, RPC, timeout, 5xx).
    - Surfacing terminal failures as typed `AnalyzerError` subclasses.
    - Handing non-empty replies to `SyntaxTreeParser` for validation.

An empty reply or a reply that fails validation yields None rather than an
error, so callers can tell "service unreachable" from "service answered
unusably". Each call keeps its own attempt counter and last error.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from ngle_analyzer.config import DEFAULT_PROMPT_FILE, config
from ngle_analyzer.models.syntax_tree import SentenceAnalysis
from ngle_analyzer.utils.helpers import load_yaml
from ngle_analyzer.utils.logger import get_logger
from ngle_analyzer.utils.metrics import metrics_tracker
from .agent_factory import AgentFactory
from .base_agent import BaseLLMAgent
from .errors import (
    ConfigurationError,
    FailureKind,
    InvalidCredentialError,
    NetworkUnreachableError,
    RetriesExhaustedError,
    ServiceCallError,
    mentions_network,
)
from .response_parser import SyntaxTreeParser

logger = get_logger()

PROMPT_KEY = "syntax_analysis"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with exponential backoff and no jitter.

    The delay before retry number `attempt_index + 1` is
    `base_delay_seconds * backoff_factor ** attempt_index` (1s, 2s, ...).
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    backoff_factor: float = 2.0

    def delay_for(self, attempt_index: int) -> float:
        return self.base_delay_seconds * (self.backoff_factor ** attempt_index)

    @classmethod
    def from_config(cls) -> "RetryPolicy":
        retry = config.get("analysis", {}).get("retry", {}) or {}
        return cls(
            max_attempts=retry.get("max_attempts", 3),
            base_delay_seconds=retry.get("base_delay_seconds", 1.0),
            backoff_factor=retry.get("backoff_factor", 2.0),
        )


def load_prompt_template(path: Optional[str] = None) -> str:
    """
    Loads the analysis prompt template.

    Args:
        path (Optional[str]): YAML file path. Defaults to `analysis.prompt_file`
            from configuration, then to the packaged prompt file.

    Returns:
        str: Template containing a `{sentence}` placeholder.
    """
    path = path or config.get("analysis", {}).get("prompt_file") or DEFAULT_PROMPT_FILE
    prompts = load_yaml(path)
    return prompts[PROMPT_KEY]["prompt"]


def classify_failure(error: BaseException) -> FailureKind:
    """Returns the failure kind of an exception raised by an agent."""
    if isinstance(error, ServiceCallError):
        return error.kind
    if isinstance(error, asyncio.TimeoutError):
        return FailureKind.TIMEOUT
    status_code = getattr(error, "status_code", None)
    if not isinstance(status_code, int):
        status_code = None
    return FailureKind.from_message(str(error), status_code)


class SentenceAnalyzer:
    """
    Requests and validates the syntactic analysis of single sentences.

    The service handle is passed in explicitly; `agent=None` represents a
    service that could not be initialized, and every call then fails with
    `ConfigurationError` without touching the network.

    Attributes:
        agent (Optional[BaseLLMAgent]): The text completion service.
        prompt_template (str): Instruction template with a `{sentence}` placeholder.
        retry (RetryPolicy): Attempt limit and backoff settings.
        parser (SyntaxTreeParser): Validator for raw replies.
    """

    def __init__(
        self,
        agent: Optional[BaseLLMAgent],
        prompt_template: Optional[str] = None,
        retry: Optional[RetryPolicy] = None,
        parser: Optional[SyntaxTreeParser] = None,
    ):
        self.agent = agent
        self.prompt_template = prompt_template or load_prompt_template()
        self.retry = retry or RetryPolicy.from_config()
        self.parser = parser or SyntaxTreeParser()

    @classmethod
    def from_config(cls, provider: Optional[str] = None) -> "SentenceAnalyzer":
        """Builds an analyzer whose agent comes from `AgentFactory.try_create_agent`."""
        analyzer = cls(agent=AgentFactory.try_create_agent(provider))
        if analyzer.is_configured():
            logger.info(
                f"SentenceAnalyzer ready (provider: {analyzer.agent.get_provider_name()}, "
                f"model: {analyzer.agent.get_model_name()})"
            )
        else:
            logger.warning("SentenceAnalyzer created without a usable service handle.")
        return analyzer

    def is_configured(self) -> bool:
        return self.agent is not None

    def build_prompt(self, sentence: str) -> str:
        return self.prompt_template.format(sentence=sentence)

    async def analyze(self, sentence: str) -> Optional[SentenceAnalysis]:
        """
        Requests the syntactic analysis of a sentence.

        Args:
            sentence (str): The sentence to analyze.

        Returns:
            Optional[SentenceAnalysis]: The validated tree, or None if the service
            returned an empty body or a reply that failed validation.

        Raises:
            ConfigurationError: If no service handle is available.
            InvalidCredentialError: If the service rejected the API key.
            NetworkUnreachableError: If the final failure was a network error.
            RetriesExhaustedError: For any other terminal failure.
        """
        if not self.is_configured():
            raise ConfigurationError()

        prompt = self.build_prompt(sentence)
        provider = self.agent.get_provider_name()
        max_attempts = self.retry.max_attempts
        logger.debug(f"Analysis prompt length: {len(prompt)}")

        for attempt in range(max_attempts):
            logger.info(
                f"Requesting syntactic analysis from {provider} "
                f"(Attempt {attempt + 1}/{max_attempts}): '{sentence[:50]}'"
            )
            try:
                response_text = await self.agent.generate(prompt)
            except Exception as e:
                kind = classify_failure(e)
                logger.warning(
                    f"Error calling {provider} (Attempt {attempt + 1}/{max_attempts}): "
                    f"{e} [kind={kind.value}, retryable={kind.retryable}]"
                )
                if kind.retryable and attempt < max_attempts - 1:
                    delay = self.retry.delay_for(attempt)
                    logger.info(f"Retrying in {delay:.2f}s...")
                    metrics_tracker.increment_retries()
                    await asyncio.sleep(delay)
                    continue

                metrics_tracker.increment_errors()
                terminal = self._terminal_error(kind, attempt + 1, e)
                logger.error(
                    f"Giving up on {provider} after {attempt + 1} attempt(s): "
                    f"{type(terminal).__name__}"
                )
                raise terminal from e

            if not response_text or not response_text.strip():
                logger.error(f"{provider} response text is empty on attempt {attempt + 1}")
                return None

            return self.parser.parse(response_text)

        # Only reachable with max_attempts < 1
        raise ConfigurationError("analysis.retry.max_attempts must be at least 1.")

    @staticmethod
    def _terminal_error(kind: FailureKind, attempts: int, error: Exception) -> Exception:
        if kind is FailureKind.CREDENTIAL:
            return InvalidCredentialError()
        if kind in (FailureKind.NETWORK, FailureKind.CONNECTIVITY) or mentions_network(str(error)):
            return NetworkUnreachableError()
        return RetriesExhaustedError(attempts, error)
