"""
Quiz API routes

Endpoints:
- ``GET  /api/prompt-types``: theme registry
- ``GET  /api/questions``: a generated question set for one theme
- ``POST /api/analyze``: analysis of a completed quiz
- ``POST /api/follow-up``: answer to a follow-up question (rate limited per IP)
- ``GET  /api/health``: liveness and configured oracle
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ..errors import QuizError, RateLimitError, ValidationError
from ..quiz.schema import Question, remaining_interactions
from ..quiz.themes import get_prompt_types, resolve_theme
from .models import (
    AnalyzeRequest,
    AnalyzeResponse,
    FollowUpRequest,
    FollowUpResponse,
    HealthResponse,
    QuestionModel,
    ThemeModel,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quiz"])


def client_ip(request: Request) -> str:
    """Rate-limit key for a request. X-Forwarded-For counts only behind a trusted proxy."""
    if request.app.state.config.server.trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce_followup_rate_limit(request: Request) -> None:
    """Dependency: per-IP limit on follow-up requests."""
    limiter = request.app.state.followup_limiter
    ip = client_ip(request)
    if not limiter.hit(ip):
        logger.warning(f"Follow-up rate limit hit for {ip}")
        raise RateLimitError("Too many requests, please try again later.", remaining_interactions=0)


def _attach_budget(error: QuizError, interaction_count: int, cap: int) -> None:
    """Make sure errors from budgeted endpoints report remainingInteractions."""
    if error.remaining_interactions is None:
        error.remaining_interactions = remaining_interactions(max(0, interaction_count), cap)


@router.get("/prompt-types", response_model=dict[str, ThemeModel])
async def prompt_types():
    return get_prompt_types()


@router.get("/questions", response_model=list[QuestionModel])
async def questions(
    request: Request,
    prompt_type: Optional[str] = Query(default=None, alias="promptType"),
    custom_prompt: Optional[str] = Query(default=None, alias="customPrompt"),
):
    cfg = request.app.state.config
    theme = resolve_theme(prompt_type, custom_prompt, cfg.quiz.custom_response_max_length)
    generated = await request.app.state.question_generator.generate(
        theme.system_prompt,
        theme.id,
        theme.question_guidance,
    )
    return [q.to_dict() for q in generated]


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(body: AnalyzeRequest, request: Request):
    cfg = request.app.state.config
    cap = cfg.quiz.interaction_cap

    try:
        theme = resolve_theme(body.prompt_type, body.custom_prompt, cfg.quiz.custom_response_max_length)
        known_questions = None
        if body.questions:
            try:
                known_questions = [Question.from_dict(q.model_dump()) for q in body.questions]
            except ValueError as e:
                raise ValidationError(f"Invalid question in request: {e}") from e

        result = await request.app.state.analysis_generator.generate(
            theme.system_prompt,
            body.answers,
            body.interaction_count,
            extra_sections=theme.extra_sections,
            questions=known_questions,
        )
    except QuizError as e:
        _attach_budget(e, body.interaction_count, cap)
        raise

    return result.to_dict()


@router.post(
    "/follow-up",
    response_model=FollowUpResponse,
    dependencies=[Depends(enforce_followup_rate_limit)],
)
async def follow_up(body: FollowUpRequest, request: Request):
    cap = request.app.state.config.quiz.interaction_cap

    try:
        result = await request.app.state.followup_generator.generate(
            body.previous_analysis or "",
            body.question or "",
            body.interaction_count,
        )
    except QuizError as e:
        _attach_budget(e, body.interaction_count, cap)
        raise

    return result.to_dict()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    provider = request.app.state.provider
    return {
        "status": "ok",
        "provider": provider.name,
        "model": request.app.state.config.models.model or provider.default_model,
    }
