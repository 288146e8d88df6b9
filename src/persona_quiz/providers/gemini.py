"""
Gemini (Google generative-language API) provider implementation

Uses the google-genai SDK's async client.
"""

import os
from typing import Optional

from .base import ModelProvider, ModelResponse, AuthenticationError, ProviderError, classify_error


class GeminiProvider(ModelProvider):
    """
    Google Gemini provider.

    API key is read from:
    1. Constructor argument
    2. GOOGLE_API_KEY environment variable
    3. GEMINI_API_KEY environment variable
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = "gemini-2.0-flash",
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Google API key (falls back to env vars)
            default_model: Default model to use
        """
        self._api_key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
        self._default_model = default_model
        self._client = None

    def check_credentials(self) -> None:
        if not self._api_key:
            raise AuthenticationError(
                "No Google API key provided. Set GOOGLE_API_KEY or pass api_key to constructor."
            )

    def _get_client(self):
        """Lazy initialization of the genai client."""
        if self._client is None:
            self.check_credentials()
            from google import genai
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def supports_json_output(self) -> bool:
        return True

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
        """Generate a response using Gemini."""
        from google.genai import types

        client = self._get_client()
        model = model or self._default_model

        config_kwargs = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if system:
            config_kwargs["system_instruction"] = system
        if top_k is not None:
            config_kwargs["top_k"] = top_k
        if top_p is not None:
            config_kwargs["top_p"] = top_p
        if json_output:
            config_kwargs["response_mime_type"] = "application/json"

        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except ProviderError:
            raise
        except Exception as e:
            raise classify_error("Gemini", e) from e

        usage = {}
        metadata = getattr(response, "usage_metadata", None)
        if metadata is not None:
            usage = {
                "input_tokens": metadata.prompt_token_count or 0,
                "output_tokens": metadata.candidates_token_count or 0,
            }

        return ModelResponse(
            content=response.text or "",
            model=model,
            provider=self.name,
            usage=usage,
            raw_response=response,
        )
