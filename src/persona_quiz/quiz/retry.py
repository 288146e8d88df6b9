"""
Bounded, sequential retry loop shared by the generators

Each attempt is one oracle call plus validation of what came back. Attempts
never overlap; a fixed delay separates them.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..config import GenerationSettings
from ..errors import ConfigurationError, GenerationError, ParseError
from ..providers.base import ModelProvider, ProviderError, ServiceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RejectedAttempt(Exception):
    """Oracle answered, but the answer failed validation."""
    pass


async def call_oracle(
    provider: ModelProvider,
    prompt: str,
    settings: GenerationSettings,
    *,
    timeout: float,
    system: Optional[str] = None,
    model: Optional[str] = None,
    json_output: bool = False,
) -> str:
    """
    One oracle call with a deadline.

    Cancellation of the calling task propagates into the provider call.

    Raises:
        ServiceUnavailableError: If the oracle does not answer within timeout
        ProviderError: Whatever the provider raised
    """
    try:
        response = await asyncio.wait_for(
            provider.generate(
                prompt,
                system=system,
                model=model,
                json_output=json_output,
                **settings.as_kwargs(),
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise ServiceUnavailableError(f"{provider.name} did not respond within {timeout:.0f}s") from e

    logger.debug(
        f"{provider.name} responded: {len(response.content)} chars, "
        f"{response.total_tokens} tokens"
    )
    return response.content


async def run_with_retries(
    attempt: Callable[[int], Awaitable[T]],
    *,
    max_attempts: int,
    delay_seconds: float,
    failure_message: str,
    label: str,
) -> T:
    """
    Run attempt(n) until it returns, at most max_attempts times.

    RejectedAttempt, ParseError, and retryable ProviderErrors consume an
    attempt. Credential failures stop immediately.

    Raises:
        ConfigurationError: If the provider rejected the credential
        GenerationError: When every attempt failed
    """
    last_error: Optional[Exception] = None

    for number in range(1, max_attempts + 1):
        try:
            return await attempt(number)
        except ProviderError as e:
            if not e.retryable:
                logger.error(f"{label}: oracle rejected credentials: {e}")
                raise ConfigurationError(str(e)) from e
            logger.warning(f"{label}: oracle call failed on attempt {number}/{max_attempts}: {e}")
            last_error = e
        except (RejectedAttempt, ParseError) as e:
            logger.warning(f"{label}: rejected attempt {number}/{max_attempts}: {e}")
            last_error = e

        if number < max_attempts and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

    logger.error(f"{label}: giving up after {max_attempts} attempts (last error: {last_error})")

    if isinstance(last_error, ProviderError):
        message = "The analysis service is temporarily unavailable. Please try again."
    else:
        message = failure_message
    raise GenerationError(message) from last_error
