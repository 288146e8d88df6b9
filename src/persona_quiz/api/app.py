"""
FastAPI application factory

The app refuses to start without a usable oracle credential. Every error
reaches the client as JSON with an ``error`` string; budgeted endpoints
also report ``remainingInteractions`` and ``success: false``.
"""

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Config, config as default_config
from ..errors import ConfigurationError, GenerationError, QuizError
from ..providers import AuthenticationError, ModelProvider, get_provider
from ..quiz.analysis import AnalysisGenerator
from ..quiz.followup import FollowupGenerator
from ..quiz.questions import QuestionGenerator
from .ratelimit import SlidingWindowRateLimiter
from .routes import router

logger = logging.getLogger(__name__)

BUDGETED_PATHS = ("/api/analyze", "/api/follow-up")


def build_provider(cfg: Config) -> ModelProvider:
    """
    Build and check the configured oracle provider.

    Raises:
        ConfigurationError: On an unknown provider or a missing credential
    """
    try:
        provider = get_provider(cfg.models.provider, model=cfg.models.model or None)
        provider.check_credentials()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    except AuthenticationError as e:
        raise ConfigurationError(str(e)) from e
    return provider


def _error_payload(request: Request, message: str, remaining: Optional[int]) -> dict:
    payload = {"error": message}
    if remaining is not None or request.url.path in BUDGETED_PATHS:
        payload["remainingInteractions"] = remaining if remaining is not None else 0
        payload["success"] = False
    return payload


def register_error_handlers(app: FastAPI) -> None:
    debug = app.state.config.server.debug

    @app.exception_handler(QuizError)
    async def quiz_error_handler(request: Request, exc: QuizError):
        if isinstance(exc, ConfigurationError):
            logger.error(f"Configuration error on {request.url.path}: {exc}")
            message = "The service is not configured correctly. Please contact the administrator."
        else:
            message = exc.message

        payload = _error_payload(request, message, exc.remaining_interactions)
        if debug and isinstance(exc, (GenerationError, ConfigurationError)):
            payload["details"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
            for err in exc.errors()
        )
        payload = _error_payload(request, f"Invalid request: {problems}", None)
        return JSONResponse(status_code=400, content=payload)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        payload = _error_payload(request, "Something went wrong. Please try again.", None)
        if debug:
            payload["details"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=500, content=payload)


def create_app(
    cfg: Optional[Config] = None,
    provider: Optional[ModelProvider] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        cfg: Configuration (defaults to the module singleton)
        provider: Oracle provider; built from cfg when omitted

    Raises:
        ConfigurationError: When the oracle credential is missing
    """
    cfg = cfg or default_config
    if provider is None:
        provider = build_provider(cfg)
    else:
        try:
            provider.check_credentials()
        except AuthenticationError as e:
            raise ConfigurationError(str(e)) from e

    model = cfg.models.model or None
    logger.info(f"Starting persona-quiz with {provider.name} ({model or provider.default_model})")

    app = FastAPI(title="persona-quiz", version=__version__)
    app.state.config = cfg
    app.state.provider = provider
    app.state.question_generator = QuestionGenerator(provider, model=model, cfg=cfg)
    app.state.analysis_generator = AnalysisGenerator(provider, model=model, cfg=cfg)
    app.state.followup_generator = FollowupGenerator(provider, model=model, cfg=cfg)
    app.state.followup_limiter = SlidingWindowRateLimiter(
        limit=cfg.server.followup_rate_limit,
        window_seconds=cfg.server.followup_rate_window_seconds,
    )

    register_error_handlers(app)
    app.include_router(router)
    return app
