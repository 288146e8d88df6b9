"""
Base protocol for text oracle providers

Defines the interface every generative-language backend implements:
prompt in, text out, with a small set of sampling controls.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Any


class ProviderError(Exception):
    """Base exception for provider errors. Retryable unless stated otherwise."""
    retryable: bool = True


class QuotaExceededError(ProviderError):
    """Provider quota or rate limit exceeded."""
    pass


class ServiceUnavailableError(ProviderError):
    """Provider returned a transient 5xx or could not be reached."""
    pass


class AuthenticationError(ProviderError):
    """Credential missing or rejected. Never retried."""
    retryable = False


@dataclass
class ModelResponse:
    """Response from the oracle."""
    content: str
    model: str
    provider: str
    usage: dict = field(default_factory=dict)
    raw_response: Optional[Any] = None

    @property
    def input_tokens(self) -> int:
        """Number of input tokens used."""
        return self.usage.get("input_tokens", 0)

    @property
    def output_tokens(self) -> int:
        """Number of output tokens used."""
        return self.usage.get("output_tokens", 0)

    @property
    def total_tokens(self) -> int:
        """Total tokens used."""
        return self.input_tokens + self.output_tokens


QUOTA_PATTERN = re.compile(
    r"(?<!\d)429(?!\d)|\brate[ _-]?limit|\bquota\b|\bresource[ _]exhausted\b|\btoo many requests\b"
)
AUTH_PATTERN = re.compile(
    r"(?<!\d)40[13](?!\d)|\bunauthori[sz]ed\b|\bauthentication\b|\bapi[ _-]?key\b"
    r"|\bpermission[ _]denied\b|\bforbidden\b"
)
UNAVAILABLE_PATTERN = re.compile(
    r"(?<!\d)50[0234](?!\d)|\bunavailable\b|\boverloaded\b|\binternal server error\b|\bdeadline exceeded\b"
)


def _status_code(error: Exception) -> Optional[int]:
    """HTTP status carried by the SDK error, if any (status_code on anthropic/openai, code on google-genai)."""
    for attr in ("status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_error(provider_name: str, error: Exception) -> ProviderError:
    """
    Map an SDK exception onto the provider error taxonomy.

    The HTTP status wins when the SDK exposes one. Otherwise the message is
    matched on whole words, the same way for every backend.
    """
    status = _status_code(error)
    if status == 429:
        return QuotaExceededError(f"{provider_name} quota exceeded: {error}")
    if status in (401, 403):
        return AuthenticationError(f"{provider_name} authentication failed: {error}")
    if status is not None and status >= 500:
        return ServiceUnavailableError(f"{provider_name} service unavailable: {error}")
    if status is not None:
        return ProviderError(f"{provider_name} API error: {error}")

    error_str = str(error).lower()

    if QUOTA_PATTERN.search(error_str):
        return QuotaExceededError(f"{provider_name} quota exceeded: {error}")

    if AUTH_PATTERN.search(error_str):
        return AuthenticationError(f"{provider_name} authentication failed: {error}")

    if UNAVAILABLE_PATTERN.search(error_str):
        return ServiceUnavailableError(f"{provider_name} service unavailable: {error}")

    return ProviderError(f"{provider_name} API error: {error}")


class ModelProvider(ABC):
    """
    Abstract base class for text oracle providers.

    Providers must implement generate(). Providers that can constrain
    output to JSON advertise it through supports_json_output.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'gemini', 'claude')."""
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Default model ID for this provider."""
        pass

    @property
    def supports_json_output(self) -> bool:
        """Whether generate(json_output=True) yields schema-shaped JSON."""
        return False

    def check_credentials(self) -> None:
        """
        Verify a credential is configured without calling the API.

        Raises:
            AuthenticationError: If no credential is available
        """
        return None

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        top_k: Optional[int] = None,
        top_p: Optional[float] = None,
        json_output: bool = False,
        **kwargs
    ) -> ModelResponse:
        """
        Generate a response from the model.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            model: Model ID (uses default if not specified)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            top_k: Optional top-k sampling cutoff
            top_p: Optional nucleus sampling cutoff
            json_output: Ask the backend to emit JSON only
            **kwargs: Provider-specific options

        Returns:
            ModelResponse with generated content

        Raises:
            ProviderError: On API errors
            QuotaExceededError: When rate limited or out of quota
            ServiceUnavailableError: On transient backend failures
            AuthenticationError: On auth failures
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.default_model!r})"
