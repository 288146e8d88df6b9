"""
Post-processing for analysis and follow-up text

clean_text() normalizes raw oracle output; parse_sections() turns the
cleaned text into an AnalysisDocument. Rendering to markup happens in the
document itself, at the HTTP boundary.
"""

import re
from typing import Iterable, Optional

from .schema import AnalysisDocument, Section

ANALYSIS_SECTIONS = ("Core Traits", "Decision-Making Style", "Key Strengths", "Growth Areas")
FOLLOWUP_SECTIONS = ("Direct Answer", "Explanation", "Additional Insights")

CODE_FENCE_PATTERN = re.compile(r"```[A-Za-z]*")
BULLET_PATTERN = re.compile(r"^([ \t]*)[*•+][ \t]+", re.MULTILINE)
EMPHASIS_PATTERN = re.compile(r"\*+|__+")
EMPTY_WRAPPER_PATTERN = re.compile(r"<(\w+)[^>]*>\s*</\1\s*>")
HEADING_MARK_PATTERN = re.compile(r"^[ \t]*#{1,6}[ \t]*", re.MULTILINE)
INNER_SPACES_PATTERN = re.compile(r"[ \t]{2,}")
LINE_EDGE_SPACES_PATTERN = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)
EXTRA_NEWLINES_PATTERN = re.compile(r"\n{3,}")
NUMBERING_PATTERN = re.compile(r"^\d+[.)]\s*")

MAX_CLEAN_PASSES = 10


def _known(headers: Optional[Iterable[str]]) -> set[str]:
    names = set(ANALYSIS_SECTIONS) | set(FOLLOWUP_SECTIONS)
    if headers:
        names |= set(headers)
    return {name.lower() for name in names}


def split_header(line: str, known_headers: Optional[Iterable[str]] = None) -> Optional[tuple[str, str]]:
    """
    Detect a section header line.

    Returns (heading, inline body) or None. Known section names match with
    or without a trailing colon and may carry body text after the colon;
    any other short line ending in a colon also counts as a header.
    """
    known = _known(known_headers)
    stripped = NUMBERING_PATTERN.sub("", line.strip())
    if not stripped:
        return None

    name, sep, rest = stripped.partition(":")
    name = name.strip()
    if name.lower() in known:
        return name, rest.strip() if sep else ""

    if (
        sep
        and not rest.strip()
        and len(name) <= 50
        and len(name.split()) <= 6
        and name[:1].isupper()
    ):
        return name, ""

    return None


def _clean_once(text: str, known_headers: Optional[Iterable[str]]) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = CODE_FENCE_PATTERN.sub("", text)
    text = BULLET_PATTERN.sub(r"\1- ", text)
    text = EMPHASIS_PATTERN.sub("", text)
    text = EMPTY_WRAPPER_PATTERN.sub("", text)
    text = HEADING_MARK_PATTERN.sub("", text)
    text = INNER_SPACES_PATTERN.sub(" ", text)
    text = LINE_EDGE_SPACES_PATTERN.sub("", text)

    # One blank line before every header
    lines = text.split("\n")
    spaced: list[str] = []
    for line in lines:
        if spaced and spaced[-1] and split_header(line, known_headers):
            spaced.append("")
        spaced.append(line)
    text = "\n".join(spaced)

    text = EXTRA_NEWLINES_PATTERN.sub("\n\n", text)
    return text.strip()


def clean_text(text: str, known_headers: Optional[Iterable[str]] = None) -> str:
    """
    Strip emphasis markup, collapse whitespace, and space out section headers.

    Idempotent: clean_text(clean_text(x)) == clean_text(x).
    """
    if not text:
        return ""
    known_headers = tuple(known_headers or ())
    for _ in range(MAX_CLEAN_PASSES):
        cleaned = _clean_once(text, known_headers)
        if cleaned == text:
            break
        text = cleaned
    return text


def parse_sections(text: str, known_headers: Optional[Iterable[str]] = None) -> AnalysisDocument:
    """Split cleaned text into headed sections. Text before the first header becomes an untitled section."""
    sections: list[Section] = []
    heading = ""
    body: list[str] = []

    def flush():
        content = EXTRA_NEWLINES_PATTERN.sub("\n\n", "\n".join(body)).strip()
        if heading or content:
            sections.append(Section(heading=heading, body=content))

    for line in text.split("\n"):
        header = split_header(line, known_headers)
        if header:
            flush()
            heading, inline = header
            body = [inline] if inline else []
        else:
            body.append(line)
    flush()

    return AnalysisDocument(sections=[s for s in sections if s.heading or s.body])


def build_document(raw: str, known_headers: Optional[Iterable[str]] = None) -> AnalysisDocument:
    """clean_text() followed by parse_sections()."""
    return parse_sections(clean_text(raw, known_headers), known_headers)
