"""
gemini_agent.py

Google Gemini implementation of the LLM agent interface.
Uses the asynchronous `google-genai` client with a JSON response MIME type.

Key Functionality:
    - One `generate_content` call per `generate()` invocation.
    - Translation of `google.genai.errors` and `httpx` transport exceptions
      into `ServiceCallError` with an explicit `FailureKind`.
    - Token usage tracking from `usage_metadata`.

Usage:
    from ngle_analyzer.agents.agent_factory import AgentFactory

    agent = AgentFactory.create_agent("gemini")
    text = await agent.generate("Prompt instructing JSON output.")
"""

import asyncio

import httpx
from google import genai
from google.genai import errors, types

from ngle_analyzer.config import config
from ngle_analyzer.utils.logger import get_logger
from ngle_analyzer.utils.metrics import metrics_tracker
from .base_agent import BaseLLMAgent
from .errors import FailureKind, ServiceCallError

logger = get_logger()

DEFAULT_MODEL = "gemini-2.5-flash"

_CREDENTIAL_STATUS_CODES = (400, 401, 403)


class GeminiAgent(BaseLLMAgent):
    """
    Gemini implementation of the text completion service.

    Reads API key, model name and temperature from `config["gemini"]`.
    """

    def __init__(self):
        """
        Initializes the Gemini client.

        Raises:
            ValueError: If `gemini.api_key` is missing or empty.
        """
        settings = config.get("gemini", {}) or {}
        api_key = settings.get("api_key")
        if not api_key:
            raise ValueError("Gemini API key is not set.")

        self.client = genai.Client(api_key=api_key)
        self.model = settings.get("model_name") or DEFAULT_MODEL
        self.temperature = settings.get("temperature")

    def _generation_config(self) -> types.GenerateContentConfig:
        if self.temperature is None:
            return types.GenerateContentConfig(response_mime_type="application/json")
        return types.GenerateContentConfig(
            response_mime_type="application/json", temperature=self.temperature
        )

    async def generate(self, prompt: str) -> str:
        logger.debug(f"Calling Gemini generate_content (model={self.model})")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self._generation_config(),
            )
        except Exception as e:
            raise self._to_service_error(e) from e

        metrics_tracker.increment_api_calls()
        usage = getattr(response, "usage_metadata", None)
        total_tokens = getattr(usage, "total_token_count", None) if usage else None
        if isinstance(total_tokens, int):
            metrics_tracker.add_tokens(total_tokens)
            logger.debug(f"API Call Successful. Total Tokens: {total_tokens}")
        else:
            logger.debug("API Call Successful. Token usage data not available.")

        return response.text or ""

    @staticmethod
    def _to_service_error(exc: Exception) -> ServiceCallError:
        if isinstance(exc, errors.ServerError):
            return ServiceCallError(str(exc), FailureKind.SERVER, exc.code)
        if isinstance(exc, errors.ClientError):
            if exc.code in _CREDENTIAL_STATUS_CODES:
                return ServiceCallError(str(exc), FailureKind.CREDENTIAL, exc.code)
            if exc.code == 408:
                return ServiceCallError(str(exc), FailureKind.TIMEOUT, exc.code)
            return ServiceCallError(str(exc), FailureKind.OTHER, exc.code)
        if isinstance(exc, errors.APIError):
            return ServiceCallError(
                str(exc), FailureKind.from_message(str(exc), exc.code), exc.code
            )
        if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
            return ServiceCallError(str(exc) or "timeout", FailureKind.TIMEOUT)
        if isinstance(exc, httpx.TransportError):
            return ServiceCallError(str(exc) or "network error", FailureKind.NETWORK)
        return ServiceCallError(str(exc), FailureKind.from_message(str(exc)))

    def get_provider_name(self) -> str:
        return "gemini"

    def get_model_name(self) -> str:
        return self.model
