"""Configuration management for the client."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

from .llm.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.openai.com/v1/"


class Configuration:
    """Manages configuration and environment variables for the client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables."""
        self.load_env()  # Load .env for API keys
        self.config_path = config_path or os.path.join(
            os.path.dirname(__file__), "config.yaml"
        )
        self._config = self._load_yaml_config(self.config_path)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @staticmethod
    def _load_yaml_config(config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ConfigurationError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def llm_api_key(self) -> str:
        """Get the API key.

        Returns:
            The API key as a string.

        Raises:
            ConfigurationError: If OPENAI_API_KEY is not set.
        """
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "API key 'OPENAI_API_KEY' not found in environment variables"
            )
        return api_key

    def get_config_dict(self) -> dict[str, Any]:
        """Get the full configuration dictionary."""
        return self._config

    def get_llm_config(self) -> dict[str, Any]:
        """Get LLM request defaults from YAML.

        ``OPENAI_BASE_URL`` in the environment takes precedence over the
        configured ``base_url``.

        Returns:
            LLM configuration dictionary.

        Raises:
            ConfigurationError: If a default is present but invalid.
        """
        llm_config = dict(self._config.get("llm", {}))
        llm_config["base_url"] = (
            os.getenv("OPENAI_BASE_URL")
            or llm_config.get("base_url")
            or DEFAULT_BASE_URL
        )

        max_tokens = llm_config.get("max_tokens")
        if max_tokens is not None and max_tokens < 1:
            raise ConfigurationError("llm.max_tokens must be at least 1")

        temperature = llm_config.get("temperature")
        if temperature is not None and not 0 <= temperature <= 2:
            raise ConfigurationError("llm.temperature must be between 0 and 2")

        return llm_config

    def get_http_client_config(self) -> dict[str, Any]:
        """Get HTTP client timeouts.

        Returns:
            HTTP client configuration dictionary with validated values.

        Raises:
            ConfigurationError: If required timeouts are missing or invalid.
        """
        http_config = self._config.get("llm", {}).get("http_client", {})

        required_keys = [
            "connect_timeout", "read_timeout", "write_timeout", "pool_timeout",
        ]
        for key in required_keys:
            if key not in http_config:
                raise ConfigurationError(
                    f"llm.http_client.{key} must be explicitly configured "
                    "in config.yaml"
                )
            if http_config[key] <= 0:
                raise ConfigurationError(f"llm.http_client.{key} must be positive")

        return http_config

    def get_streaming_config(self) -> dict[str, Any]:
        """Get stream decoder configuration.

        Returns:
            Streaming configuration dictionary.

        Raises:
            ConfigurationError: If max_frame_bytes is not a positive integer.
        """
        streaming_config = self._config.get("llm", {}).get("streaming", {})
        max_frame_bytes = streaming_config.get("max_frame_bytes")
        if max_frame_bytes is not None and (
            not isinstance(max_frame_bytes, int) or max_frame_bytes < 1
        ):
            raise ConfigurationError(
                "llm.streaming.max_frame_bytes must be a positive integer or null"
            )
        return streaming_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration dictionary.
        """
        return self._config.get("logging", {})
