"""
Tests for the theme registry.
"""

import pytest

from persona_quiz.errors import ValidationError
from persona_quiz.quiz.themes import CUSTOM_THEME_ID, THEMES, get_prompt_types, resolve_theme


class TestRegistry:
    """Tests for registered themes."""

    def test_expected_themes(self):
        assert set(THEMES) == {
            "BANKAI_SHIKAI",
            "PERSONALITY_ANALYSIS",
            "AVATAR_ELEMENT",
            "SUPER_POWER",
            "PRINCESS_POWER",
            "CUSTOM",
        }

    def test_prompt_types_shape(self):
        prompt_types = get_prompt_types()

        for entry in prompt_types.values():
            assert set(entry) == {"title", "description", "systemPrompt"}
            assert entry["title"]

    def test_theme_sections(self):
        assert THEMES["BANKAI_SHIKAI"].extra_sections == ("Shikai", "Bankai")
        assert THEMES["PERSONALITY_ANALYSIS"].extra_sections == ()


class TestResolveTheme:
    """Tests for resolve_theme."""

    def test_registered(self):
        assert resolve_theme("AVATAR_ELEMENT") is THEMES["AVATAR_ELEMENT"]

    def test_missing(self):
        with pytest.raises(ValidationError, match="Prompt type is required"):
            resolve_theme(None)

    def test_unknown(self):
        with pytest.raises(ValidationError, match="Invalid prompt type: NOPE"):
            resolve_theme("NOPE")

    def test_custom_requires_prompt(self):
        with pytest.raises(ValidationError, match="Custom prompt is required"):
            resolve_theme(CUSTOM_THEME_ID, "   ")

    def test_custom_prompt_sanitized(self):
        theme = resolve_theme(CUSTOM_THEME_ID, "Which <b>pirate</b> are you?")

        assert theme.id == CUSTOM_THEME_ID
        assert theme.system_prompt == "Which pirate are you?"

    def test_custom_prompt_bounded(self):
        theme = resolve_theme(CUSTOM_THEME_ID, "x" * 900, max_custom_length=100)
        assert len(theme.system_prompt) == 100

    def test_custom_prompt_ignored_for_registered(self):
        theme = resolve_theme("SUPER_POWER", "ignore me")
        assert "ignore me" not in theme.system_prompt
