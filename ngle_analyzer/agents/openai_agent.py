"""
openai_agent.py

OpenAI implementation of the LLM agent interface.
Uses the Responses API with the `json_object` text format.

Key Functionality:
    - Asynchronous API calls using the `openai` library.
    - One request per `generate()` call; the sentence analyzer owns retries.
    - Translation of `openai` exception types into `ServiceCallError`.
    - Token usage tracking via `metrics_tracker`.

Usage:
    from ngle_analyzer.agents.agent_factory import AgentFactory

    agent = AgentFactory.create_agent("openai")
    text = await agent.generate("Prompt instructing JSON output.")
"""

import openai
from openai import AsyncOpenAI

from ngle_analyzer.config import config
from ngle_analyzer.utils.logger import get_logger
from ngle_analyzer.utils.metrics import metrics_tracker
from .base_agent import BaseLLMAgent
from .errors import FailureKind, ServiceCallError

logger = get_logger()

SYSTEM_INSTRUCTIONS = (
    "Eres un experto en sintaxis del español. "
    "Responde únicamente con el objeto JSON solicitado."
)


def classify_openai_style_error(exc: Exception, sdk) -> ServiceCallError:
    """
    Maps an exception raised by an OpenAI-style SDK to a `ServiceCallError`.

    The `openai` and `anthropic` packages share the same exception hierarchy
    names, so the mapping is written once against the module passed as `sdk`.

    Args:
        exc (Exception): The exception raised by the client call.
        sdk: The SDK module (`openai` or `anthropic`).

    Returns:
        ServiceCallError: The classified failure.
    """
    message = str(exc)
    if isinstance(exc, sdk.APITimeoutError):
        return ServiceCallError(message or "timeout", FailureKind.TIMEOUT)
    if isinstance(exc, sdk.APIConnectionError):
        return ServiceCallError(message or "network error", FailureKind.NETWORK)
    if isinstance(exc, (sdk.AuthenticationError, sdk.PermissionDeniedError, sdk.BadRequestError)):
        return ServiceCallError(message, FailureKind.CREDENTIAL, getattr(exc, "status_code", None))
    if isinstance(exc, sdk.APIStatusError):
        status_code = getattr(exc, "status_code", None)
        if isinstance(status_code, int) and status_code >= 500:
            return ServiceCallError(message, FailureKind.SERVER, status_code)
        return ServiceCallError(message, FailureKind.OTHER, status_code)
    return ServiceCallError(message, FailureKind.from_message(message))


class OpenAIAgent(BaseLLMAgent):
    """
    OpenAI implementation of the text completion service.

    Reads API key, model name, token limit and temperature from `config["openai"]`.
    """

    def __init__(self):
        """
        Initializes the asynchronous OpenAI client.

        Raises:
            ValueError: If `openai.api_key` is missing or empty.
        """
        settings = config.get("openai", {}) or {}
        api_key = settings.get("api_key")
        if not api_key:
            raise ValueError("OpenAI API key is not set.")

        self.client = AsyncOpenAI(api_key=api_key)
        self.model = settings.get("model_name", "gpt-4o-mini")
        self.max_tokens = settings.get("max_tokens", 4096)
        self.temperature = settings.get("temperature", 0.2)

    async def generate(self, prompt: str) -> str:
        logger.debug(f"Calling OpenAI responses API (model={self.model})")
        try:
            response = await self.client.responses.create(
                model=self.model,
                instructions=SYSTEM_INSTRUCTIONS,
                input=prompt,
                max_output_tokens=self.max_tokens,
                temperature=self.temperature,
                text={"format": {"type": "json_object"}},
            )
        except Exception as e:
            raise classify_openai_style_error(e, openai) from e

        metrics_tracker.increment_api_calls()
        usage = getattr(response, "usage", None)
        total_tokens = getattr(usage, "total_tokens", None) if usage else None
        if isinstance(total_tokens, int):
            metrics_tracker.add_tokens(total_tokens)
            logger.debug(f"API Call Successful. Total Tokens: {total_tokens}")
        else:
            logger.debug("API Call Successful. Token usage data not available.")

        output_items = response.output
        if not output_items:
            return ""
        content_items = getattr(output_items[0], "content", None)
        if not content_items:
            return ""
        return content_items[0].text or ""

    def get_provider_name(self) -> str:
        return "openai"

    def get_model_name(self) -> str:
        return self.model
