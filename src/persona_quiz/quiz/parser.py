"""
Question parser

Turns raw oracle text into Question records. Blocks are split wherever a
line starts a new numbered question, so options that are not separated
by blank lines still land in the right block.
"""

import json
import logging
import re
from typing import Optional

from ..errors import ParseError
from .schema import Question

logger = logging.getLogger(__name__)

BLOCK_SPLIT_PATTERN = re.compile(r"\n(?=[ \t#*>]*\d+\.)")
QUESTION_LINE_PATTERN = re.compile(r"^(\d+)\.\s*(.+)")
OPTION_LINE_PATTERN = re.compile(r"^[a-dA-D]\)\s*(.+)")
CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def _clean_line(line: str) -> str:
    """Drop markdown decoration the oracle adds despite being told not to."""
    line = line.replace("**", "").replace("__", "")
    return line.lstrip("#> \t").strip()


def split_blocks(text: str) -> list[str]:
    """Split text into candidate question blocks (numbered-lookahead policy)."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return [block for block in BLOCK_SPLIT_PATTERN.split(normalized) if block.strip()]


def parse_block(block: str) -> Optional[Question]:
    """
    Parse one block into a Question.

    Returns None unless the first line is a numbered question and exactly
    four option lines follow. A line directly under the question or an
    option, matching neither pattern, is a wrapped continuation of it; a
    blank line ends continuation.
    """
    lines = [_clean_line(line) for line in block.split("\n")]
    while lines and not lines[0]:
        lines.pop(0)
    if not lines:
        return None

    question_match = QUESTION_LINE_PATTERN.match(lines[0])
    if not question_match:
        return None

    question_text = question_match.group(2).strip()
    options = []
    continuing = True
    for line in lines[1:]:
        if not line:
            continuing = False
            continue
        option_match = OPTION_LINE_PATTERN.match(line)
        if option_match:
            options.append(option_match.group(1).strip())
            continuing = True
        elif continuing:
            if options:
                options[-1] = f"{options[-1]} {line}"
            else:
                question_text = f"{question_text} {line}"

    if len(options) != 4 or not question_text:
        logger.debug(f"Dropping block with {len(options)} options: {question_text[:60]!r}")
        return None

    return Question(question=question_text, options=tuple(options))


def parse_questions_text(text: str) -> list[Question]:
    """Regex parser for numbered/lettered oracle text."""
    questions = []
    for block in split_blocks(text or ""):
        question = parse_block(block)
        if question is not None:
            questions.append(question)
    return questions


def parse_questions_json(text: str) -> list[Question]:
    """
    Parse the structured-output shape.

    Accepts {"questions": [{"question": ..., "options": [...]}, ...]} or the
    bare list. Items that break the four-option rule are dropped.

    Raises:
        json.JSONDecodeError: If the text is not JSON
    """
    data = json.loads(CODE_FENCE_PATTERN.sub("", text.strip()))
    items = data.get("questions", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []

    questions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        question_text = str(item.get("question", "")).strip()
        options = item.get("options")
        if not question_text or not isinstance(options, list) or len(options) != 4:
            continue
        options = [str(o).strip() for o in options]
        if not all(options):
            continue
        questions.append(Question(question=question_text, options=tuple(options)))
    return questions


def _looks_like_json(text: str) -> bool:
    stripped = CODE_FENCE_PATTERN.sub("", text.strip())
    return stripped.startswith("{") or stripped.startswith("[")


def parse_questions(text: str) -> list[Question]:
    """
    Convert raw oracle text into an ordered list of Questions.

    JSON output is parsed structurally; anything else (including JSON that
    fails to decode) goes through the numbered-block regex parser.

    Raises:
        ParseError: If no valid question was found
    """
    questions: list[Question] = []

    if text and _looks_like_json(text):
        try:
            questions = parse_questions_json(text)
        except json.JSONDecodeError:
            logger.debug("Structured output did not decode, falling back to text parsing")

    if not questions:
        questions = parse_questions_text(text)

    if not questions:
        raise ParseError("no valid questions")

    return questions
