"""
Quiz themes

Each theme carries the instruction text that steers both question
generation and the tone of the analysis.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..errors import ValidationError
from .sanitize import sanitize_text

CUSTOM_THEME_ID = "CUSTOM"


@dataclass(frozen=True)
class Theme:
    """A named quiz category."""
    id: str
    title: str
    description: str
    system_prompt: str
    question_guidance: str = ""
    extra_sections: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "systemPrompt": self.system_prompt,
        }


THEMES: dict[str, Theme] = {
    "BANKAI_SHIKAI": Theme(
        id="BANKAI_SHIKAI",
        title="Bleach Zanpakuto Analysis",
        description="Answer a series of questions to determine your Bankai and Shikai.",
        system_prompt=(
            "You are a master Zanpakuto analyst from Bleach. Based on the user's answers, "
            "determine their Shikai and Bankai abilities, appearance, and name."
        ),
        question_guidance=(
            "Probe how the person fights, protects others, and handles inner conflict, "
            "the way a Zanpakuto spirit would test its wielder."
        ),
        extra_sections=("Shikai", "Bankai"),
    ),
    "PERSONALITY_ANALYSIS": Theme(
        id="PERSONALITY_ANALYSIS",
        title="Personality Analysis",
        description="Answer a series of questions to analyze your personality.",
        system_prompt=(
            "You are a highly skilled personality analyst. Based on the user's answers, "
            "provide a detailed analysis of their personality."
        ),
        question_guidance=(
            "Cover social energy, decision making, emotional regulation, openness to "
            "new experiences, and how the person handles stress."
        ),
    ),
    "AVATAR_ELEMENT": Theme(
        id="AVATAR_ELEMENT",
        title="Avatar Element Analysis",
        description="Answer a series of questions to determine your Avatar element.",
        system_prompt=(
            "You are a wise Avatar master. Based on the user's answers, determine which of "
            "the four elements (Water, Earth, Fire, Air) they would bend."
        ),
        question_guidance=(
            "Contrast adaptability, persistence, passion, and freedom so each option "
            "leans toward one of the four elements."
        ),
        extra_sections=("Element", "Bending Style"),
    ),
    "SUPER_POWER": Theme(
        id="SUPER_POWER",
        title="Super Power Analysis",
        description="Answer a series of questions to determine your super power.",
        system_prompt=(
            "You are a super power analyst. Based on the user's answers, determine what "
            "super power they would possess."
        ),
        question_guidance=(
            "Explore moral choices, instincts in a crisis, and what the person would do "
            "with limitless ability."
        ),
        extra_sections=("Super Power", "Power Origin"),
    ),
    "PRINCESS_POWER": Theme(
        id="PRINCESS_POWER",
        title="Princess Power Analysis",
        description="Answer a series of questions to determine your princess power.",
        system_prompt=(
            "You are a royal advisor. Based on the user's answers, determine what kind of "
            "princess power they would have."
        ),
        question_guidance=(
            "Ask about leadership, kindness, courage, and how the person would rule "
            "and protect a kingdom."
        ),
        extra_sections=("Princess Power", "Royal Domain"),
    ),
    CUSTOM_THEME_ID: Theme(
        id=CUSTOM_THEME_ID,
        title="Custom Quiz",
        description="Create your own custom quiz with a specific theme.",
        system_prompt=(
            "You are an expert quiz creator. Generate questions based on the user's custom prompt."
        ),
    ),
}


def get_prompt_types() -> dict[str, dict]:
    """Theme registry as served by /api/prompt-types."""
    return {theme_id: theme.to_dict() for theme_id, theme in THEMES.items()}


def resolve_theme(
    prompt_type: Optional[str],
    custom_prompt: Optional[str] = None,
    max_custom_length: int = 500,
) -> Theme:
    """
    Look up the theme for a request.

    Args:
        prompt_type: Theme identifier
        custom_prompt: Instruction text, required when prompt_type is CUSTOM
        max_custom_length: Bound applied to the sanitized custom prompt

    Returns:
        The registered Theme, or a per-request Theme for CUSTOM

    Raises:
        ValidationError: On a missing or unknown theme, or a missing custom prompt
    """
    if not prompt_type:
        raise ValidationError("Prompt type is required")

    if prompt_type not in THEMES:
        raise ValidationError(f"Invalid prompt type: {prompt_type}")

    base = THEMES[prompt_type]
    if prompt_type != CUSTOM_THEME_ID:
        return base

    instruction = sanitize_text(custom_prompt or "", max_custom_length)
    if not instruction:
        raise ValidationError("Custom prompt is required for custom quiz type")

    return Theme(
        id=CUSTOM_THEME_ID,
        title=base.title,
        description=base.description,
        system_prompt=instruction,
    )
