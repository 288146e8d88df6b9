"""
Quiz system for persona-quiz

Question generation, answer analysis, and follow-up answers on top of a
text oracle, plus the client-held session state.
"""

from .schema import (
    Question,
    Answer,
    Section,
    AnalysisDocument,
    AnalysisResult,
    FollowupResult,
    QuizSession,
    remaining_interactions,
)
from .themes import Theme, THEMES, CUSTOM_THEME_ID, resolve_theme, get_prompt_types
from .parser import parse_questions
from .formatting import clean_text, parse_sections, build_document
from .questions import QuestionGenerator
from .analysis import AnalysisGenerator
from .followup import FollowupGenerator

__all__ = [
    "Question",
    "Answer",
    "Section",
    "AnalysisDocument",
    "AnalysisResult",
    "FollowupResult",
    "QuizSession",
    "remaining_interactions",
    "Theme",
    "THEMES",
    "CUSTOM_THEME_ID",
    "resolve_theme",
    "get_prompt_types",
    "parse_questions",
    "clean_text",
    "parse_sections",
    "build_document",
    "QuestionGenerator",
    "AnalysisGenerator",
    "FollowupGenerator",
]
