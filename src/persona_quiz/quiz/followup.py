"""
Follow-up generator

Answers a question about a previous analysis, within the interaction budget.
"""

import logging
from typing import Optional

from ..config import Config, config as default_config
from ..errors import RateLimitError, ValidationError
from ..providers.base import ModelProvider
from .formatting import FOLLOWUP_SECTIONS, build_document, clean_text
from .prompts import format_followup_prompt
from .retry import RejectedAttempt, call_oracle, run_with_retries
from .sanitize import sanitize_text, strip_markup
from .schema import AnalysisDocument, FollowupResult, check_interaction_count, remaining_interactions

logger = logging.getLogger(__name__)


class FollowupGenerator:
    """
    Generates answers to follow-up questions.

    The budget check happens before any oracle call. The caller owns the
    interaction counter and increments it after a successful answer.
    """

    def __init__(
        self,
        provider: ModelProvider,
        model: Optional[str] = None,
        cfg: Optional[Config] = None,
    ):
        """
        Initialize generator.

        Args:
            provider: Text oracle provider
            model: Optional model override
            cfg: Configuration (defaults to the module singleton)
        """
        self.provider = provider
        self.model = model
        self.config = cfg or default_config

    async def generate(
        self,
        previous_analysis: str,
        question: str,
        interaction_count: int = 0,
    ) -> FollowupResult:
        """
        Answer one follow-up question.

        Args:
            previous_analysis: Analysis text or rendered HTML from the earlier call
            question: The user's follow-up question
            interaction_count: Follow-ups already used

        Returns:
            FollowupResult with the answer document and remaining follow-ups

        Raises:
            ValidationError: If the analysis or question is missing
            RateLimitError: If the interaction cap is already reached
            GenerationError: When the retry budget is exhausted
        """
        cap = self.config.quiz.interaction_cap
        check_interaction_count(interaction_count)

        analysis_text = strip_markup(previous_analysis or "")
        question_text = sanitize_text(question or "", self.config.quiz.custom_response_max_length)
        if not analysis_text or not question_text:
            raise ValidationError(
                "Question and previous analysis are required",
                remaining_interactions=remaining_interactions(interaction_count, cap),
            )

        if interaction_count >= cap:
            logger.info(f"Follow-up refused: {interaction_count}/{cap} interactions used")
            raise RateLimitError("maximum follow-ups reached", remaining_interactions=0)

        prompt = format_followup_prompt(analysis_text, question_text)
        min_length = self.config.quiz.min_followup_length

        async def attempt(number: int) -> AnalysisDocument:
            content = await call_oracle(
                self.provider,
                prompt,
                self.config.generation.followup,
                timeout=self.config.retry.oracle_timeout_seconds,
                model=self.model,
            )
            cleaned = clean_text(content, FOLLOWUP_SECTIONS)
            if len(cleaned) < min_length:
                raise RejectedAttempt(f"follow-up answer too short ({len(cleaned)} chars)")
            return build_document(cleaned, FOLLOWUP_SECTIONS)

        document = await run_with_retries(
            attempt,
            max_attempts=self.config.retry.max_attempts,
            delay_seconds=self.config.retry.delay_seconds,
            failure_message="Failed to generate follow-up response. Please try again.",
            label="follow-up",
        )

        return FollowupResult(
            document=document,
            remaining_interactions=remaining_interactions(interaction_count, cap),
        )
