"""
Exception hierarchy for persona-quiz

Every error the quiz core raises derives from QuizError and carries the
HTTP status the API layer reports it with.
"""

from typing import Optional


class QuizError(Exception):
    """Base exception for all quiz errors."""
    status_code: int = 500

    def __init__(self, message: str, *, remaining_interactions: Optional[int] = None):
        self.message = message
        self.remaining_interactions = remaining_interactions
        super().__init__(message)


class ConfigurationError(QuizError):
    """Oracle credential or provider setup is missing or invalid."""
    status_code = 500


class ValidationError(QuizError):
    """Caller supplied missing or invalid input."""
    status_code = 400


class ParseError(QuizError):
    """Oracle output contained no recognizable question block."""
    status_code = 502


class GenerationError(QuizError):
    """Retry budget exhausted without a usable oracle result."""
    status_code = 500


class RateLimitError(QuizError):
    """Interaction cap or per-IP request limit reached."""
    status_code = 429

    def __init__(self, message: str, *, remaining_interactions: Optional[int] = 0):
        super().__init__(message, remaining_interactions=remaining_interactions)
