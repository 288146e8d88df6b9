"""
persona-quiz: themed quizzes with generative-model personality analysis.

Generates validated multiple-choice question sets from a text oracle, turns
the answers into a sectioned analysis, and answers a bounded number of
follow-up questions.
"""

__version__ = "0.1.0"

from .config import config, Config
from .errors import (
    QuizError,
    ConfigurationError,
    ValidationError,
    ParseError,
    GenerationError,
    RateLimitError,
)
from .quiz import (
    Question,
    QuizSession,
    QuestionGenerator,
    AnalysisGenerator,
    FollowupGenerator,
    THEMES,
    resolve_theme,
)

__all__ = [
    # Config
    "config",
    "Config",
    # Errors
    "QuizError",
    "ConfigurationError",
    "ValidationError",
    "ParseError",
    "GenerationError",
    "RateLimitError",
    # Quiz
    "Question",
    "QuizSession",
    "QuestionGenerator",
    "AnalysisGenerator",
    "FollowupGenerator",
    "THEMES",
    "resolve_theme",
]
