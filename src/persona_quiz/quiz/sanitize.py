"""
Input sanitization for user-supplied text

Custom responses, custom theme prompts, and follow-up questions all end up
inside oracle prompts, so markup and script payloads are stripped first.
"""

import html
import re
from typing import Optional

TAG_PATTERN = re.compile(r"<[^>]*>")
URI_SCHEME_PATTERN = re.compile(r"javascript:|data:|vbscript:", re.IGNORECASE)
DISALLOWED_CHARS_PATTERN = re.compile(r"[^\w\s.,!?'\"()\-:;@#$%&*+=/]")
WHITESPACE_PATTERN = re.compile(r"\s{2,}")

# "b) Some option" as stored for a multiple-choice selection
OPTION_MARKER_PATTERN = re.compile(r"^\s*([a-dA-D])\)\s*(\S.*)$", re.DOTALL)

CUSTOM_RESPONSE_PREFIX = "[CUSTOM RESPONSE]"


def sanitize_text(text: str, max_length: int = 500) -> str:
    """
    Strip markup and script-injection characters from free text.

    Args:
        text: Raw user input
        max_length: Maximum length of the returned string

    Returns:
        Cleaned text, never containing '<' or '>'
    """
    if not text:
        return ""

    cleaned = TAG_PATTERN.sub("", text)
    cleaned = URI_SCHEME_PATTERN.sub("", cleaned)
    cleaned = DISALLOWED_CHARS_PATTERN.sub("", cleaned)
    cleaned = WHITESPACE_PATTERN.sub(" ", cleaned)
    return cleaned.strip()[:max_length].strip()


def split_option_marker(answer: str) -> Optional[tuple[str, str]]:
    """Return (letter, option text) when the answer carries a lettered marker."""
    match = OPTION_MARKER_PATTERN.match(answer or "")
    if not match:
        return None
    return match.group(1).lower(), match.group(2).strip()


def has_option_marker(answer: str) -> bool:
    return split_option_marker(answer) is not None


def strip_markup(text: str, max_length: int = 8000) -> str:
    """
    Reduce rendered analysis HTML back to plain text.

    Used on the previous analysis a client echoes back for a follow-up.
    """
    if not text:
        return ""
    plain = re.sub(r"<br\s*/?>|</(?:p|div|h\d|li|ul)>", "\n", text, flags=re.IGNORECASE)
    plain = TAG_PATTERN.sub("", plain)
    plain = html.unescape(plain).replace("<", "").replace(">", "")
    plain = re.sub(r"\n{3,}", "\n\n", plain)
    return plain.strip()[:max_length]
