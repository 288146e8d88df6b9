"""
Claude (Anthropic) provider

The SDK's own retries are switched off; the generators run their own
bounded retry loop and count every attempt.
"""

import logging
import os
from typing import Optional

from ..config import ModelConfig
from .base import ModelProvider, ModelResponse, AuthenticationError, ProviderError, classify_error

logger = logging.getLogger(__name__)


class ClaudeProvider(ModelProvider):
    """
    Anthropic Claude as the text oracle.

    The key comes from the constructor or ANTHROPIC_API_KEY.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = ModelConfig.PROVIDER_DEFAULTS["claude"],
    ):
        self._api_key = api_key or os.getenv(ModelConfig.API_KEY_ENV["claude"])
        self._default_model = default_model
        self._client = None

    def check_credentials(self) -> None:
        if not self._api_key:
            raise AuthenticationError(
                f"Claude needs an API key: set {ModelConfig.API_KEY_ENV['claude']}"
            )

    def _get_client(self):
        if self._client is None:
            self.check_credentials()
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key, max_retries=0)
        return self._client

    @property
    def name(self) -> str:
        return "claude"

    @property
    def default_model(self) -> str:
        return self._default_model

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
        Send one prompt to Claude.

        top_p is ignored (the API rejects it alongside temperature), and
        json_output is left to the prompt wording since Claude has no JSON mode.
        """
        params = {
            "model": model or self._default_model,
            "max_tokens": max_tokens,
            # Anthropic caps temperature at 1.0
            "temperature": min(1.0, max(0.0, temperature)),
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            params["system"] = system
        if top_k is not None:
            params["top_k"] = top_k

        try:
            message = await self._get_client().messages.create(**params)
        except ProviderError:
            raise
        except Exception as e:
            raise classify_error("Claude", e) from e

        if message.stop_reason == "max_tokens":
            logger.debug(f"Claude output truncated at {max_tokens} tokens")

        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")

        return ModelResponse(
            content=text,
            model=message.model,
            provider=self.name,
            usage={
                "input_tokens": message.usage.input_tokens,
                "output_tokens": message.usage.output_tokens,
            },
            raw_response=message,
        )
