"""
Text oracle providers for persona-quiz

Supports multiple generative-language backends with a common interface.
Providers: Gemini (Google), Claude (Anthropic), DeepSeek (OpenAI-compatible), Mock
"""

from typing import Optional

from .base import (
    ModelProvider, ModelResponse, ProviderError, QuotaExceededError,
    ServiceUnavailableError, AuthenticationError,
)
from .gemini import GeminiProvider
from .claude import ClaudeProvider
from .deepseek import DeepSeekProvider
from .mock import MockProvider

__all__ = [
    # Base classes and types
    "ModelProvider",
    "ModelResponse",
    "ProviderError",
    "QuotaExceededError",
    "ServiceUnavailableError",
    "AuthenticationError",
    # Providers
    "GeminiProvider",
    "ClaudeProvider",
    "DeepSeekProvider",
    "MockProvider",
    "get_provider",
]

PROVIDERS = {
    "gemini": GeminiProvider,
    "claude": ClaudeProvider,
    "deepseek": DeepSeekProvider,
    "mock": MockProvider,
}


def get_provider(name: str, model: Optional[str] = None, **kwargs) -> ModelProvider:
    """
    Factory function to get a provider by name.

    Args:
        name: Provider name ('gemini', 'claude', 'deepseek', 'mock')
        model: Optional default model override
        **kwargs: Provider-specific options

    Returns:
        Configured ModelProvider instance

    Raises:
        ValueError: If provider name is unknown
    """
    if name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}. Valid options: {list(PROVIDERS.keys())}")

    if model:
        key = "_default_model" if name == "mock" else "default_model"
        kwargs[key] = model

    return PROVIDERS[name](**kwargs)
