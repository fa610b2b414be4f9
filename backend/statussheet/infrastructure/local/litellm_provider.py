"""
LiteLLM provider implementation.

Supports OpenAI, Bedrock, and other providers via LiteLLM.
Includes support for custom endpoints (api_base) for proxy servers.
"""

import os
from typing import Optional

from statussheet.core.config import get_settings
from statussheet.interfaces.llm_provider import ILLMProvider


class LiteLLMProvider(ILLMProvider):
    """LiteLLM provider with custom endpoint support."""

    def __init__(
        self,
        model_name: str,
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        """
        Initialize LiteLLM provider.

        Args:
            model_name: LiteLLM model identifier (e.g., "openai/gpt-4o-mini")
            api_base: Custom API endpoint URL (optional, for proxy servers)
                     Note: Do NOT include /v1 suffix - LiteLLM adds it automatically
            api_key: Custom API key (optional, overrides default)
        """
        self._model_name = model_name
        self._settings = get_settings()
        self._api_base = api_base or self._settings.LITELLM_API_BASE or None
        self._api_key = api_key or self._settings.LITELLM_API_KEY or None

        if self._settings.DEBUG:
            os.environ.setdefault("LITELLM_LOG", "DEBUG")

    def get_model(self) -> str:
        """Get the raw LiteLLM model identifier."""
        return self._model_name

    def get_api_base(self) -> Optional[str]:
        """Get the configured LiteLLM API base, if any."""
        return self._api_base

    def get_api_key(self) -> Optional[str]:
        """Get the configured LiteLLM API key, if any."""
        return self._api_key

    def get_model_name(self) -> str:
        """Get human-readable model name."""
        if self._api_base:
            return f"LiteLLM ({self._model_name} @ {self._api_base})"
        return f"LiteLLM ({self._model_name})"
