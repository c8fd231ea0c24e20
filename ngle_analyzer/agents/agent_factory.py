"""
agent_factory.py

Factory for creating LLM agent instances based on configuration.
Caches one instance per provider and turns initialization failures into an
explicit disabled state for callers that must not crash at startup.

Design Pattern: Factory + per-provider Singleton
- `create_agent` raises on unknown providers or missing credentials.
- `try_create_agent` returns None instead and logs the failure; the analyzer
  then reports itself as not configured.
"""

from typing import Dict, Optional

from ngle_analyzer.config import config
from ngle_analyzer.utils.logger import get_logger
from .base_agent import BaseLLMAgent

logger = get_logger()


class AgentFactory:
    """
    Factory for creating and managing LLM agent instances.

    Usage:
        # Provider from config (llm.provider, default 'gemini')
        agent = AgentFactory.create_agent()

        # Specific provider
        openai_agent = AgentFactory.create_agent("openai")

        # Startup path: None when the service cannot be initialized
        agent = AgentFactory.try_create_agent()
    """

    _providers: Dict[str, type] = {}

    _instances: Dict[str, BaseLLMAgent] = {}

    @classmethod
    def _initialize_providers(cls):
        """Initialize provider registry with lazy imports."""
        if not cls._providers:
            from .anthropic_agent import AnthropicAgent
            from .gemini_agent import GeminiAgent
            from .openai_agent import OpenAIAgent

            cls._providers = {
                "gemini": GeminiAgent,
                "openai": OpenAIAgent,
                "anthropic": AnthropicAgent,
            }

    @classmethod
    def _resolve_provider(cls, provider: Optional[str]) -> str:
        if provider is None:
            provider = config.get("llm", {}).get("provider", "gemini")
        return provider.lower()

    @classmethod
    def create_agent(cls, provider: Optional[str] = None) -> BaseLLMAgent:
        """
        Create or retrieve the agent instance for a provider.

        Args:
            provider: Provider name ('gemini', 'openai', 'anthropic').
                     If None, reads config['llm']['provider'].

        Returns:
            BaseLLMAgent: Configured agent instance (one per provider).

        Raises:
            ValueError: If the provider is unknown or its API key is missing.
        """
        cls._initialize_providers()
        provider = cls._resolve_provider(provider)

        if provider not in cls._providers:
            available = list(cls._providers.keys())
            raise ValueError(
                f"Unknown LLM provider: '{provider}'. "
                f"Available providers: {available}"
            )

        if provider in cls._instances:
            logger.debug(f"Returning existing {provider} agent instance")
            return cls._instances[provider]

        logger.info(f"Creating new {provider} agent instance")
        agent_class = cls._providers[provider]

        try:
            agent = agent_class()
        except Exception as e:
            logger.error(f"Failed to create {provider} agent: {e}")
            raise

        cls._instances[provider] = agent
        logger.info(
            f"Successfully created {provider} agent "
            f"(model: {agent.get_model_name()})"
        )
        return agent

    @classmethod
    def try_create_agent(cls, provider: Optional[str] = None) -> Optional[BaseLLMAgent]:
        """
        Like `create_agent`, but returns None when initialization fails.

        The failure is logged once here; callers treat None as "service not
        configured" for the lifetime of the process (or until `reset`).

        Args:
            provider: Provider name, or None to read it from configuration.

        Returns:
            Optional[BaseLLMAgent]: The agent, or None if it could not be created.
        """
        try:
            return cls.create_agent(provider)
        except Exception as e:
            logger.error(
                f"Text completion service disabled: could not initialize provider "
                f"'{provider or config.get('llm', {}).get('provider', 'gemini')}': {e}"
            )
            return None

    @classmethod
    def register_provider(cls, name: str, agent_class: type):
        """
        Register a new provider class.

        Args:
            name: Provider name.
            agent_class: Agent class implementing BaseLLMAgent.

        Raises:
            TypeError: If agent_class doesn't inherit from BaseLLMAgent.
        """
        cls._initialize_providers()

        if not isinstance(agent_class, type) or not issubclass(agent_class, BaseLLMAgent):
            raise TypeError(
                f"Agent class must inherit from BaseLLMAgent, got {agent_class}"
            )

        cls._providers[name.lower()] = agent_class
        logger.info(f"Registered new LLM provider: {name}")

    @classmethod
    def get_available_providers(cls) -> list:
        cls._initialize_providers()
        return list(cls._providers.keys())

    @classmethod
    def reset(cls):
        """
        Clear all cached instances (useful for testing and re-initialization).
        """
        cls._instances = {}
        logger.debug("Reset all agent instances")
