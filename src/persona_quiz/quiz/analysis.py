"""
Analysis generator

Turns a theme and the user's ordered answers into a sectioned analysis.
"""

import logging
from typing import Optional, Sequence

from ..config import Config, config as default_config
from ..errors import ValidationError
from ..providers.base import ModelProvider
from .formatting import ANALYSIS_SECTIONS, build_document, clean_text
from .prompts import format_analysis_prompt
from .retry import RejectedAttempt, call_oracle, run_with_retries
from .sanitize import CUSTOM_RESPONSE_PREFIX
from .schema import (
    AnalysisDocument,
    AnalysisResult,
    Answer,
    Question,
    check_interaction_count,
    remaining_interactions,
)

logger = logging.getLogger(__name__)


class AnalysisGenerator:
    """
    Generates the personality analysis for a completed quiz.

    Custom answers are sanitized and marked so the oracle treats them as
    signal to analyze, not as instructions.
    """

    def __init__(
        self,
        provider: ModelProvider,
        model: Optional[str] = None,
        cfg: Optional[Config] = None,
    ):
        self.provider = provider
        self.model = model
        self.config = cfg or default_config

    def classify_answers(
        self,
        answers: Sequence[str],
        questions: Optional[Sequence[Question]] = None,
    ) -> list[Answer]:
        """
        Classify raw answers into selections and custom responses.

        Raises:
            ValidationError: If there are no answers, or one is empty
        """
        if not answers:
            raise ValidationError("At least one answer is required")

        max_length = self.config.quiz.custom_response_max_length
        classified = []
        for position, raw in enumerate(answers):
            if not isinstance(raw, str):
                raise ValidationError(f"Answer {position + 1} must be a string")
            question = questions[position] if questions and position < len(questions) else None
            answer = Answer.classify(raw, question, max_length)
            if not answer.text:
                raise ValidationError(f"Answer {position + 1} is empty")
            classified.append(answer)
        return classified

    def build_prompt(
        self,
        system_prompt: str,
        answers: Sequence[Answer],
        extra_sections: Sequence[str] = (),
    ) -> str:
        sections = list(ANALYSIS_SECTIONS) + [s for s in extra_sections if s not in ANALYSIS_SECTIONS]
        return format_analysis_prompt(
            system_prompt,
            [answer.prompt_line(n) for n, answer in enumerate(answers, start=1)],
            sections,
            CUSTOM_RESPONSE_PREFIX,
        )

    async def generate(
        self,
        system_prompt: str,
        answers: Sequence[str],
        interaction_count: int = 0,
        *,
        extra_sections: Sequence[str] = (),
        questions: Optional[Sequence[Question]] = None,
    ) -> AnalysisResult:
        """
        Generate an analysis.

        Args:
            system_prompt: Theme instruction text
            answers: Answers in question order
            interaction_count: Follow-ups already used (>= 0)
            extra_sections: Theme-specific sections to request
            questions: Optional question set, used to recognize selections sent without a marker

        Returns:
            AnalysisResult with the document and remaining follow-ups

        Raises:
            ValidationError: On missing instruction text or bad answers
            GenerationError: When the retry budget is exhausted
        """
        if not system_prompt or not system_prompt.strip():
            raise ValidationError("Instruction text is required for analysis")
        check_interaction_count(interaction_count)

        classified = self.classify_answers(answers, questions)
        custom_count = sum(1 for a in classified if a.is_custom)
        logger.debug(f"Analyzing {len(classified)} answers ({custom_count} custom)")

        known_headers = tuple(ANALYSIS_SECTIONS) + tuple(extra_sections)
        prompt = self.build_prompt(system_prompt, classified, extra_sections)
        min_length = self.config.quiz.min_analysis_length

        async def attempt(number: int) -> AnalysisDocument:
            content = await call_oracle(
                self.provider,
                prompt,
                self.config.generation.analysis,
                timeout=self.config.retry.oracle_timeout_seconds,
                model=self.model,
            )
            cleaned = clean_text(content, known_headers)
            if len(cleaned) < min_length:
                raise RejectedAttempt(f"analysis too short ({len(cleaned)} chars)")
            document = build_document(cleaned, known_headers)
            if not document.headings:
                raise RejectedAttempt("analysis has no section headers")
            return document

        document = await run_with_retries(
            attempt,
            max_attempts=self.config.retry.max_attempts,
            delay_seconds=self.config.retry.delay_seconds,
            failure_message="Failed to generate analysis. Please try again.",
            label="analysis",
        )

        return AnalysisResult(
            document=document,
            remaining_interactions=remaining_interactions(
                interaction_count, self.config.quiz.interaction_cap
            ),
        )
