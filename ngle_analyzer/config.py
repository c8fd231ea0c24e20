"""
config.py

Configuration management for the syntactic analysis client.

Settings are loaded once from `config.yaml` at the project root, environment
variables written as `${ENV_VAR_NAME}` are substituted, and the result is
validated with Pydantic. A singleton `Config` instance backs the module-level
`config` dictionary.

Usage Example:

1. Import the config dictionary:
   from ngle_analyzer.config import config

2. Access a configuration value:
   provider = config["llm"]["provider"]
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

DEFAULT_PROMPT_FILE = str(Path(__file__).parent / "prompts" / "syntax_analysis.yaml")


class RetryConfig(BaseModel):
    max_attempts: int = Field(3, ge=1)
    base_delay_seconds: float = Field(1.0, ge=0)
    backoff_factor: float = Field(2.0, ge=1)


class AnalysisConfig(BaseModel):
    retry: RetryConfig = RetryConfig()
    prompt_file: str = DEFAULT_PROMPT_FILE


class LLMConfig(BaseModel):
    provider: str = "gemini"


class ConfigModel(BaseModel):
    llm: LLMConfig = LLMConfig()
    gemini: Dict[str, Any] = Field(default_factory=dict)
    openai: Dict[str, Any] = Field(default_factory=dict)
    anthropic: Dict[str, Any] = Field(default_factory=dict)
    analysis: AnalysisConfig = AnalysisConfig()
    paths: Dict[str, Any] = Field(default_factory=dict)
    logging: Dict[str, Any] = Field(default_factory=dict)
    api: Dict[str, Any] = Field(default_factory=dict)


def _expand_env(data: Any) -> Any:
    """Recursively replaces `${NAME}` placeholders with environment values ("" if unset)."""
    if isinstance(data, dict):
        return {k: _expand_env(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env(item) for item in data]
    if isinstance(data, str):
        return _ENV_PATTERN.sub(lambda m: os.getenv(m.group(1), ""), data)
    return data


class Config:
    """
    Loads and validates application configuration from a YAML file.

    Used as a singleton through the module-level `config` dictionary.
    The file path defaults to `config.yaml` at the project root and can be
    overridden with the `NGLE_ANALYZER_CONFIG` environment variable.
    """

    _instance = None
    _config: Optional[Dict[str, Any]] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._config = cls._instance._load_config()
        return cls._instance

    @staticmethod
    def config_path() -> Path:
        override = os.getenv("NGLE_ANALYZER_CONFIG")
        if override:
            return Path(override)
        return Path(__file__).parent.parent / "config.yaml"

    def _load_config(self) -> Dict[str, Any]:
        config_path = self.config_path()

        config_dict: Dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as stream:
                try:
                    config_dict = yaml.safe_load(stream) or {}
                except yaml.YAMLError as exc:
                    print(f"Error loading {config_path}: {exc}")
                    raise

        final_config: Dict[str, Any] = _expand_env(config_dict)

        # Sections explicitly left empty in YAML load as None
        for section in ("logging", "api", "paths"):
            if final_config.get(section) is None:
                final_config.pop(section, None)

        try:
            final_config = ConfigModel(**final_config).model_dump()
        except ValidationError as e:
            print(f"Configuration validation error: {e}")
            raise

        return final_config

    @property
    def config(self) -> Dict[str, Any]:
        if self._config is None:
            raise RuntimeError("Config not loaded")
        return self._config

    def get(self, key, default=None):
        """
        Retrieves a top-level configuration value, returning a default if not found.

        Args:
            key (str): The top-level key (e.g., 'llm').
            default (optional): The value to return if the key is not found.

        Returns:
            Any: The configuration value or the provided default.
        """
        return self.config.get(key, default)

    def __getitem__(self, key):
        return self.config[key]

    def __repr__(self):
        return f"Config(path={self.config_path()})"


# Singleton instance
config = Config().config
