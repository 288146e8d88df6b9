"""
Quiz schema and data structures

Defines questions, answers, analysis documents, and the client-held
session state for one quiz run.
"""

from dataclasses import dataclass, field
from typing import Optional
import html
import json

from ..errors import ValidationError
from .sanitize import CUSTOM_RESPONSE_PREFIX, sanitize_text, split_option_marker

OPTION_LETTERS = "abcd"


def remaining_interactions(interaction_count: int, cap: int = 3) -> int:
    """Follow-ups left in the budget, never negative."""
    return max(0, cap - interaction_count)


def check_interaction_count(interaction_count: int) -> int:
    """Validate a client-reported interaction count."""
    if isinstance(interaction_count, bool) or not isinstance(interaction_count, int):
        raise ValidationError("interactionCount must be an integer")
    if interaction_count < 0:
        raise ValidationError("interactionCount cannot be negative")
    return interaction_count


@dataclass(frozen=True)
class Question:
    """A multiple-choice question with exactly four options."""
    question: str
    options: tuple[str, ...]

    def __post_init__(self):
        if not self.question.strip():
            raise ValueError("question text must not be empty")
        if len(self.options) != len(OPTION_LETTERS):
            raise ValueError(f"expected {len(OPTION_LETTERS)} options, got {len(self.options)}")

    def option_with_marker(self, index: int) -> str:
        """The stored answer form for a selection, e.g. 'b) Hiking'."""
        return f"{OPTION_LETTERS[index]}) {self.options[index]}"

    def to_dict(self) -> dict:
        return {"question": self.question, "options": list(self.options)}

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(question=data["question"], options=tuple(data["options"]))


@dataclass(frozen=True)
class Answer:
    """One answer, matched to its question by position."""
    text: str
    is_custom: bool = False

    @classmethod
    def classify(
        cls,
        raw: str,
        question: Optional[Question] = None,
        max_length: int = 500,
    ) -> "Answer":
        """
        Decide whether a raw answer string is a selection or a custom response.

        A selection either carries a lettered marker ("c) ...") or equals one
        of the known options of its question. When the question is known, a
        marker only counts if the text after it is that letter's option.
        Anything else is custom text. Both kinds are sanitized.
        """
        raw = (raw or "").strip()
        marked = split_option_marker(raw)
        selection = None

        if question is not None:
            if marked is not None:
                letter, text = marked
                if text == question.options[OPTION_LETTERS.index(letter)].strip():
                    selection = cls._selection(letter, text, max_length)
            elif raw in question.options:
                index = question.options.index(raw)
                selection = cls._selection(OPTION_LETTERS[index], raw, max_length)
        elif marked is not None:
            selection = cls._selection(*marked, max_length)

        if selection is not None:
            return selection
        return cls(text=sanitize_text(raw, max_length), is_custom=True)

    @classmethod
    def _selection(cls, letter: str, option: str, max_length: int) -> Optional["Answer"]:
        text = sanitize_text(option, max_length)
        if not text:
            return None
        return cls(text=f"{letter}) {text}", is_custom=False)

    def prompt_line(self, number: int) -> str:
        """Render for the analysis prompt."""
        if self.is_custom:
            return f"{number}. {CUSTOM_RESPONSE_PREFIX} {self.text}"
        return f"{number}. {self.text}"


@dataclass
class Section:
    """A headed block of an analysis or follow-up answer."""
    heading: str
    body: str

    def to_dict(self) -> dict:
        return {"heading": self.heading, "body": self.body}


@dataclass
class AnalysisDocument:
    """
    Structured oracle output.

    Kept as data until the HTTP boundary, where to_html() renders it.
    """
    sections: list[Section] = field(default_factory=list)

    @property
    def headings(self) -> list[str]:
        return [s.heading for s in self.sections if s.heading]

    def to_dict(self) -> dict:
        return {"sections": [s.to_dict() for s in self.sections]}

    def to_text(self) -> str:
        parts = []
        for section in self.sections:
            if section.heading:
                parts.append(f"{section.heading}:\n{section.body}".rstrip())
            elif section.body:
                parts.append(section.body)
        return "\n\n".join(parts)

    def to_html(self) -> str:
        blocks = []
        for section in self.sections:
            if not section.heading and not section.body.strip():
                continue
            inner = []
            if section.heading:
                inner.append(f"<h3>{html.escape(section.heading)}</h3>")
            inner.extend(_body_to_html(section.body))
            blocks.append('<div class="analysis-section">' + "".join(inner) + "</div>")
        return "".join(blocks)


def _body_to_html(body: str) -> list[str]:
    """Paragraphs become <p>, runs of '- ' lines become a <ul>."""
    out = []
    for paragraph in body.split("\n\n"):
        lines = [line.strip() for line in paragraph.splitlines() if line.strip()]
        if not lines:
            continue
        if all(line.startswith("- ") for line in lines):
            items = "".join(f"<li>{html.escape(line[2:])}</li>" for line in lines)
            out.append(f"<ul>{items}</ul>")
        else:
            out.append("<p>" + "<br>".join(html.escape(line) for line in lines) + "</p>")
    return out


@dataclass
class AnalysisResult:
    """Analysis document plus the follow-up budget left."""
    document: AnalysisDocument
    remaining_interactions: int

    def to_dict(self) -> dict:
        return {
            "analysis": self.document.to_html(),
            "sections": [s.to_dict() for s in self.document.sections],
            "remainingInteractions": self.remaining_interactions,
            "success": True,
        }


@dataclass
class FollowupResult:
    """Follow-up answer document plus the follow-up budget left."""
    document: AnalysisDocument
    remaining_interactions: int

    def to_dict(self) -> dict:
        return {
            "answer": self.document.to_html(),
            "sections": [s.to_dict() for s in self.document.sections],
            "remainingInteractions": self.remaining_interactions,
            "success": True,
        }


@dataclass
class QuizSession:
    """
    Client-held state for one quiz run.

    Tracks the current question, the answers given so far (by position),
    and how many follow-ups have been used. Nothing here is stored server-side.
    """
    theme_id: str
    questions: list[Question]
    custom_prompt: Optional[str] = None
    current_index: int = 0
    answers: list[Optional[str]] = field(default_factory=list)
    interaction_count: int = 0
    interaction_cap: int = 3
    analysis: Optional[str] = None

    def __post_init__(self):
        if not self.answers:
            self.answers = [None] * len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    @property
    def is_complete(self) -> bool:
        return bool(self.questions) and all(a is not None for a in self.answers)

    @property
    def remaining_interactions(self) -> int:
        return remaining_interactions(self.interaction_count, self.interaction_cap)

    @property
    def can_follow_up(self) -> bool:
        return self.analysis is not None and self.interaction_count < self.interaction_cap

    def select_option(self, choice) -> str:
        """
        Record a multiple-choice selection for the current question and advance.

        Args:
            choice: Option letter ('a'-'d') or zero-based index
        """
        question = self._require_current()
        if isinstance(choice, str):
            letter = choice.strip().lower()
            if len(letter) != 1 or letter not in OPTION_LETTERS:
                raise ValidationError(f"Invalid option: {choice!r}")
            index = OPTION_LETTERS.index(letter)
        else:
            index = int(choice)
            if not 0 <= index < len(question.options):
                raise ValidationError(f"Invalid option index: {choice}")

        answer = question.option_with_marker(index)
        self._record(answer)
        return answer

    def answer_custom(self, text: str, max_length: int = 500) -> str:
        """Record a free-text response for the current question and advance."""
        self._require_current()
        cleaned = sanitize_text(text, max_length)
        if not cleaned:
            raise ValidationError("Custom response is empty after sanitization")
        self._record(cleaned)
        return cleaned

    def go_back(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    def record_analysis(self, analysis: str) -> None:
        self.analysis = analysis

    def record_follow_up(self) -> int:
        """Consume one interaction after a successful follow-up."""
        self.interaction_count += 1
        return self.remaining_interactions

    def restart(self) -> None:
        """Discard everything except the question set."""
        self.current_index = 0
        self.answers = [None] * len(self.questions)
        self.interaction_count = 0
        self.analysis = None

    def answer_list(self) -> list[str]:
        if not self.is_complete:
            raise ValidationError("All questions must be answered before analysis")
        return [a for a in self.answers if a is not None]

    def _require_current(self) -> Question:
        question = self.current_question
        if question is None:
            raise ValidationError("No question left to answer")
        return question

    def _record(self, answer: str) -> None:
        self.answers[self.current_index] = answer
        self.current_index += 1

    def to_dict(self) -> dict:
        return {
            "theme_id": self.theme_id,
            "custom_prompt": self.custom_prompt,
            "questions": [q.to_dict() for q in self.questions],
            "current_index": self.current_index,
            "answers": self.answers,
            "interaction_count": self.interaction_count,
            "analysis": self.analysis,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
