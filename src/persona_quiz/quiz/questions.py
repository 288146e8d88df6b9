"""
Question generator

Asks the oracle for a themed question set and keeps asking, up to the retry
budget, until the parsed batch has the right shape and enough variety.
"""

import logging
import re
from collections import Counter
from typing import Optional

from ..config import Config, config as default_config
from ..errors import ValidationError
from ..providers.base import ModelProvider
from .parser import parse_questions
from .prompts import format_question_prompt
from .retry import RejectedAttempt, call_oracle, run_with_retries
from .schema import Question

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"[a-z']+")

STOPWORDS = frozenset({
    "what", "which", "when", "where", "would", "your", "you", "with", "that", "this",
    "there", "their", "they", "them", "have", "does", "from", "about", "into", "most",
    "more", "some", "like", "feel", "prefer", "best", "describe", "how", "who", "why",
    "are", "the", "and", "for", "will", "been", "were", "being", "could", "should",
    "other", "than", "then", "just", "over", "each", "something", "someone", "typically",
    "usually", "approach", "situation",
})


def repeated_content_words(
    questions: list[Question],
    max_repeats: int = 3,
) -> dict[str, int]:
    """
    Content words (length > 3, not stopwords) that occur more than max_repeats
    times across all question texts.
    """
    counts: Counter = Counter()
    for question in questions:
        for word in WORD_PATTERN.findall(question.question.lower()):
            word = word.strip("'")
            if len(word) > 3 and word not in STOPWORDS:
                counts[word] += 1
    return {word: n for word, n in counts.items() if n > max_repeats}


class QuestionGenerator:
    """
    Generates a validated question set for a theme.

    Stateless: every call to generate() is independent.
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

    @property
    def use_json_output(self) -> bool:
        return self.config.quiz.structured_output and self.provider.supports_json_output

    async def generate(
        self,
        system_prompt: str,
        theme_id: str = "",
        guidance: str = "",
    ) -> list[Question]:
        """
        Produce exactly question_count questions for the theme.

        Args:
            system_prompt: Theme instruction text
            theme_id: Theme identifier, used for logging
            guidance: Optional theme-flavoured focus for the prompt

        Returns:
            List of Questions, each with four options

        Raises:
            ValidationError: If the instruction text is empty
            GenerationError: When the retry budget is exhausted
        """
        if not system_prompt or not system_prompt.strip():
            raise ValidationError("Instruction text is required to generate questions")

        quiz_cfg = self.config.quiz
        json_output = self.use_json_output
        prompt = format_question_prompt(
            system_prompt,
            count=quiz_cfg.question_count,
            guidance=guidance,
            json_output=json_output,
        )

        async def attempt(number: int) -> list[Question]:
            content = await call_oracle(
                self.provider,
                prompt,
                self.config.generation.questions,
                timeout=self.config.retry.oracle_timeout_seconds,
                model=self.model,
                json_output=json_output,
            )
            questions = parse_questions(content)
            self.validate_batch(questions)
            logger.info(f"Generated {len(questions)} questions for {theme_id or 'theme'} on attempt {number}")
            return questions

        return await run_with_retries(
            attempt,
            max_attempts=self.config.retry.max_attempts,
            delay_seconds=self.config.retry.delay_seconds,
            failure_message="unable to generate valid questions",
            label=f"questions[{theme_id or 'custom'}]",
        )

    def validate_batch(self, questions: list[Question]) -> None:
        """
        Reject a parsed batch that has the wrong count, wrong option count,
        or too little variety.

        Raises:
            RejectedAttempt: Describing the first failed check
        """
        quiz_cfg = self.config.quiz

        if len(questions) != quiz_cfg.question_count:
            raise RejectedAttempt(
                f"expected {quiz_cfg.question_count} questions, parsed {len(questions)}"
            )

        bad = [q for q in questions if len(q.options) != quiz_cfg.options_per_question]
        if bad:
            raise RejectedAttempt(f"{len(bad)} questions without {quiz_cfg.options_per_question} options")

        if quiz_cfg.diversity_check:
            repeated = repeated_content_words(questions, quiz_cfg.diversity_max_word_repeats)
            if len(repeated) > quiz_cfg.diversity_max_repeated_words:
                logger.debug(f"Repetitive batch, overused words: {sorted(repeated)}")
                raise RejectedAttempt(f"questions too repetitive ({len(repeated)} overused words)")
