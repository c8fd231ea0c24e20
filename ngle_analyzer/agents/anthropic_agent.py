"""
anthropic_agent.py

Anthropic Claude implementation of the LLM agent interface.
Uses the Messages API; JSON output is requested through the system prompt
since the API has no native JSON mode.

Usage:
    from ngle_analyzer.agents.agent_factory import AgentFactory

    agent = AgentFactory.create_agent("anthropic")
    text = await agent.generate("Prompt instructing JSON output.")
"""

import anthropic
from anthropic import AsyncAnthropic

from ngle_analyzer.config import config
from ngle_analyzer.utils.logger import get_logger
from ngle_analyzer.utils.metrics import metrics_tracker
from .base_agent import BaseLLMAgent
from .openai_agent import classify_openai_style_error

logger = get_logger()


class AnthropicAgent(BaseLLMAgent):
    """
    Anthropic implementation of the text completion service.

    Response structure differs from OpenAI: the text lives at
    `response.content[0].text` and usage reports input/output tokens only.
    """

    def __init__(self):
        """
        Initializes the asynchronous Anthropic client.

        Raises:
            ValueError: If `anthropic.api_key` is missing or empty.
        """
        settings = config.get("anthropic", {}) or {}
        api_key = settings.get("api_key")
        if not api_key:
            raise ValueError("Anthropic API key is not set.")

        self.client = AsyncAnthropic(api_key=api_key)
        self.model = settings.get("model_name", "claude-3-5-haiku-latest")
        self.max_tokens = settings.get("max_tokens", 4096)
        self.temperature = settings.get("temperature", 0.2)

        self.system_prompt = (
            "Eres un experto en sintaxis del español que analiza oraciones. "
            "Responde siempre solo con JSON válido, sin texto explicativo. "
            "Devuelve únicamente el objeto JSON solicitado."
        )

    async def generate(self, prompt: str) -> str:
        logger.debug(f"Calling Anthropic Messages API (model={self.model})")
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=self.system_prompt,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise classify_openai_style_error(e, anthropic) from e

        metrics_tracker.increment_api_calls()
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", None) if usage else None
        output_tokens = getattr(usage, "output_tokens", None) if usage else None
        if isinstance(input_tokens, int) and isinstance(output_tokens, int):
            metrics_tracker.add_tokens(input_tokens + output_tokens)
            logger.debug(
                f"API Call Successful. Total Tokens: {input_tokens + output_tokens} "
                f"(Input: {input_tokens}, Output: {output_tokens})"
            )
        else:
            logger.debug("API Call Successful. Token usage data not available.")

        if not response.content:
            return ""
        return getattr(response.content[0], "text", "") or ""

    def get_provider_name(self) -> str:
        return "anthropic"

    def get_model_name(self) -> str:
        return self.model
