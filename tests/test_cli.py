"""
Tests for the command-line interface (mock oracle only).
"""

import json

import pytest

from persona_quiz.cli import main
from persona_quiz.providers.mock import MockProvider, generate_mock_analysis, generate_mock_questions


class TestCli:
    """Tests for persona-quiz subcommands."""

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_themes(self, capsys):
        main(["themes"])
        out = capsys.readouterr().out

        assert "BANKAI_SHIKAI" in out
        assert "Custom Quiz" in out

    def test_questions_json(self, capsys):
        main(["--mock", "questions", "PERSONALITY_ANALYSIS", "--json"])
        data = json.loads(capsys.readouterr().out)

        assert len(data) == 10
        assert len(data[0]["options"]) == 4

    def test_custom_without_prompt_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--mock", "questions", "CUSTOM"])

        assert exc_info.value.code == 1
        assert "Custom prompt is required" in capsys.readouterr().err

    def test_play(self, monkeypatch, capsys, tmp_path):
        """Answer every question, ask one follow-up, then stop."""
        replies = iter(["a", "<", "b"] + ["c"] * 9 + ["Would I enjoy teaching?", ""])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))
        saved = tmp_path / "session.json"

        main(["--mock", "play", "PERSONALITY_ANALYSIS", "--save", str(saved)])

        out = capsys.readouterr().out
        assert "Core Traits" in out
        assert "Direct Answer" in out

        session = json.loads(saved.read_text())
        assert session["answers"][0].startswith("b) ")
        assert session["interaction_count"] == 1

    def test_play_keeps_session_when_follow_up_fails(self, monkeypatch, capsys, tmp_path):
        """A failed follow-up is reported and the session is still saved."""
        provider = MockProvider(responses=[
            generate_mock_questions(),
            generate_mock_analysis(),
            "Too short.",
        ])
        monkeypatch.setattr("persona_quiz.cli.make_provider", lambda cfg: provider)
        replies = iter(["a"] * 10 + ["Would I enjoy teaching?", ""])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))
        saved = tmp_path / "session.json"

        main(["--mock", "play", "PERSONALITY_ANALYSIS", "--save", str(saved)])

        assert "Failed to generate follow-up response" in capsys.readouterr().out
        session = json.loads(saved.read_text())
        assert session["interaction_count"] == 0
        assert session["analysis"].startswith("Core Traits:")
