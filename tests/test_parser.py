"""
Tests for the question parser.
"""

import json

import pytest

from persona_quiz.errors import ParseError
from persona_quiz.providers.mock import generate_mock_questions
from persona_quiz.quiz.parser import (
    parse_block,
    parse_questions,
    parse_questions_json,
    parse_questions_text,
    split_blocks,
)


def block(number: int, text: str, options=("One", "Two", "Three", "Four")) -> str:
    lines = [f"{number}. {text}"]
    lines += [f"{letter}) {option}" for letter, option in zip("abcd", options)]
    return "\n".join(lines)


class TestParseBlock:
    """Tests for single block parsing."""

    def test_valid_block(self):
        question = parse_block(block(1, "What do you value most?"))

        assert question.question == "What do you value most?"
        assert question.options == ("One", "Two", "Three", "Four")

    def test_three_options_dropped(self):
        assert parse_block(block(1, "Short?", options=("A", "B", "C"))) is None

    def test_five_options_dropped(self):
        text = block(1, "Long?") + "\na) Extra"
        assert parse_block(text) is None

    def test_no_question_line(self):
        assert parse_block("Here are your questions:\na) x\nb) y\nc) z\nd) w") is None

    def test_markdown_decoration_stripped(self):
        text = "**1. Which element calls to you?**\na) **Fire**\nb) Water\nc) Earth\nd) Air"
        question = parse_block(text)

        assert question.question == "Which element calls to you?"
        assert question.options[0] == "Fire"

    def test_wrapped_option_joined(self):
        text = (
            "1. When a plan falls apart,\n"
            "what do you do first?\n"
            "a) Start over with a\n"
            "completely new plan\n"
            "b) Ask for help\n"
            "c) Take a break\n"
            "d) Push through"
        )
        question = parse_block(text)

        assert question.question == "When a plan falls apart, what do you do first?"
        assert question.options[0] == "Start over with a completely new plan"
        assert question.options[1] == "Ask for help"

    def test_trailing_text_after_blank_line_ignored(self):
        text = block(1, "Last one?") + "\n\nI hope these questions help!"
        assert parse_block(text).options[3] == "Four"

    def test_uppercase_option_letters(self):
        text = "1. Pick one\nA) North\nB) South\nC) East\nD) West"
        assert parse_block(text).options == ("North", "South", "East", "West")


class TestParseQuestionsText:
    """Tests for the regex parser over whole responses."""

    def test_ten_questions_in_order(self):
        questions = parse_questions_text(generate_mock_questions(count=10))

        assert len(questions) == 10
        assert questions[0].question == "How would you spend a free Saturday?"
        assert questions[9].question == "How would you imagine your ideal home?"

    def test_bad_block_skipped_order_kept(self):
        text = "\n\n".join([
            block(1, "First?"),
            block(2, "Broken?", options=("A", "B", "C")),
            block(3, "Third?"),
        ])
        questions = parse_questions_text(text)

        assert [q.question for q in questions] == ["First?", "Third?"]

    def test_blocks_without_blank_lines(self):
        """Adjacent blocks are split at each numbered question line."""
        text = "\n".join(block(n, f"Question {n}?") for n in range(1, 4))
        questions = parse_questions_text(text)

        assert len(questions) == 3
        assert all(len(q.options) == 4 for q in questions)

    def test_preamble_ignored(self):
        text = "Sure! Here are your questions.\n\n" + block(1, "Only one?")
        assert len(parse_questions_text(text)) == 1

    def test_windows_newlines(self):
        text = block(1, "CRLF?").replace("\n", "\r\n")
        assert len(parse_questions_text(text)) == 1

    def test_split_blocks(self):
        text = block(1, "A?") + "\n" + block(2, "B?")
        assert len(split_blocks(text)) == 2


class TestParseQuestionsJson:
    """Tests for the structured-output path."""

    def test_object_shape(self):
        questions = parse_questions_json(generate_mock_questions(count=5, as_json=True))
        assert len(questions) == 5

    def test_bare_list(self):
        text = json.dumps([{"question": "Q?", "options": ["a", "b", "c", "d"]}])
        assert parse_questions_json(text)[0].question == "Q?"

    def test_code_fence(self):
        inner = json.dumps({"questions": [{"question": "Q?", "options": ["a", "b", "c", "d"]}]})
        assert len(parse_questions_json(f"```json\n{inner}\n```")) == 1

    def test_wrong_option_count_dropped(self):
        text = json.dumps({"questions": [
            {"question": "Good?", "options": ["a", "b", "c", "d"]},
            {"question": "Bad?", "options": ["a", "b"]},
            {"question": "", "options": ["a", "b", "c", "d"]},
        ]})
        assert [q.question for q in parse_questions_json(text)] == ["Good?"]


class TestParseQuestions:
    """Tests for the combined entry point."""

    def test_json_first(self):
        questions = parse_questions(generate_mock_questions(count=10, as_json=True))
        assert len(questions) == 10

    def test_text_fallback(self):
        questions = parse_questions(generate_mock_questions(count=10))
        assert len(questions) == 10

    def test_broken_json_falls_back(self):
        """Undecodable JSON-looking text still goes through the regex parser."""
        text = "{ not json\n" + block(1, "Recovered?")
        assert parse_questions(text)[0].question == "Recovered?"

    def test_no_questions_raises(self):
        with pytest.raises(ParseError, match="no valid questions"):
            parse_questions("I cannot help with that.")

    def test_empty_raises(self):
        with pytest.raises(ParseError):
            parse_questions("")
