"""
base_agent.py

Abstract base class defining the interface for LLM agents.

An agent is the "text completion service" seen by the sentence analyzer:
it sends one prompt with a JSON response-format hint and returns the raw
text body. Agents make exactly one attempt per call; retries, backoff and
response validation belong to `SentenceAnalyzer`.
"""

from abc import ABC, abstractmethod


class BaseLLMAgent(ABC):
    """
    Abstract base class for LLM agents.

    Implementations must:
    - Return the raw text body, which may be empty.
    - Raise `ServiceCallError` with an explicit `FailureKind` for every failed
      call, translating the provider SDK's exception types.
    - Track successful calls and token usage via `metrics_tracker`.
    """

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Sends the prompt to the model and returns its text reply.

        Args:
            prompt: Complete prompt instructing the model to answer in JSON.

        Returns:
            str: Raw text body ("" when the provider returned no text).

        Raises:
            ServiceCallError: If the call failed for any reason.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """
        Returns:
            str: Provider identifier (e.g., 'gemini', 'openai', 'anthropic').
        """

    @abstractmethod
    def get_model_name(self) -> str:
        """
        Returns:
            str: Model identifier (e.g., 'gemini-2.5-flash').
        """
