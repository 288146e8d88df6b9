"""
DeepSeek provider

Talks to DeepSeek's OpenAI-compatible chat API through the openai SDK.
Pointing base_url elsewhere makes it usable with any compatible endpoint.
"""

import logging
import os
from typing import Optional

from ..config import ModelConfig
from .base import ModelProvider, ModelResponse, AuthenticationError, ProviderError, classify_error

logger = logging.getLogger(__name__)

DEEPSEEK_BASE_URL = "https://api.deepseek.com"


class DeepSeekProvider(ModelProvider):
    """
    DeepSeek as the text oracle.

    Supports JSON mode, so question sets are requested as structured output.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = ModelConfig.PROVIDER_DEFAULTS["deepseek"],
        base_url: Optional[str] = None,
    ):
        self._api_key = api_key or os.getenv(ModelConfig.API_KEY_ENV["deepseek"])
        self._default_model = default_model
        self._base_url = base_url or os.getenv("DEEPSEEK_BASE_URL", DEEPSEEK_BASE_URL)
        self._client = None

    def check_credentials(self) -> None:
        if not self._api_key:
            raise AuthenticationError(
                f"DeepSeek needs an API key: set {ModelConfig.API_KEY_ENV['deepseek']}"
            )

    def _get_client(self):
        if self._client is None:
            self.check_credentials()
            from openai import AsyncOpenAI
            # Retries are owned by the quiz generators
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, max_retries=0)
        return self._client

    @property
    def name(self) -> str:
        return "deepseek"

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
        """Send one prompt to DeepSeek. The API has no top_k."""
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})

        params = {
            "model": model or self._default_model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if top_p is not None:
            params["top_p"] = top_p
        if json_output:
            params["response_format"] = {"type": "json_object"}

        try:
            completion = await self._get_client().chat.completions.create(**params)
        except ProviderError:
            raise
        except Exception as e:
            raise classify_error("DeepSeek", e) from e

        choice = completion.choices[0] if completion.choices else None
        if choice is not None and choice.finish_reason == "length":
            logger.debug(f"DeepSeek output truncated at {max_tokens} tokens")
        text = (choice.message.content or "") if choice is not None and choice.message else ""

        tokens = completion.usage
        return ModelResponse(
            content=text,
            model=completion.model,
            provider=self.name,
            usage={
                "input_tokens": tokens.prompt_tokens,
                "output_tokens": tokens.completion_tokens,
            } if tokens else {},
            raw_response=completion,
        )
