"""
LLM provider interface.

Defines the contract for LLM (Large Language Model) access.
Implementations: LiteLLM (OpenAI, Bedrock, proxies, etc.), Gemini API.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ILLMProvider(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    def get_model(self) -> str:
        """
        Get the model identifier used for completion calls.

        Returns:
            Model identifier string (e.g., "openai/gpt-4o-mini")
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """
        Get the human-readable model name.

        Returns:
            Model name string for logging/display
        """
        pass

    def get_api_base(self) -> Optional[str]:
        """Custom endpoint for OpenAI-compatible proxies, if any."""
        return None

    def get_api_key(self) -> Optional[str]:
        """API key to pass explicitly, if any."""
        return None
