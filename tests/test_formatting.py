"""
Tests for analysis text cleanup and sectioning.
"""

from persona_quiz.providers.mock import generate_mock_analysis, generate_mock_followup
from persona_quiz.quiz.formatting import (
    FOLLOWUP_SECTIONS,
    build_document,
    clean_text,
    parse_sections,
    split_header,
)
from persona_quiz.quiz.schema import AnalysisDocument, Section


class TestCleanText:
    """Tests for clean_text."""

    def test_strips_emphasis(self):
        cleaned = clean_text("**Core Traits:**\nYou are *very* __curious__.")

        assert "*" not in cleaned
        assert "__" not in cleaned
        assert cleaned.startswith("Core Traits:")

    def test_bullets_normalized(self):
        cleaned = clean_text("Key Strengths:\n* Patience\n• Focus\n+ Humor")
        assert cleaned == "Key Strengths:\n- Patience\n- Focus\n- Humor"

    def test_heading_marks_removed(self):
        assert clean_text("## Growth Areas\nSlow down.") == "Growth Areas\nSlow down."

    def test_blank_line_before_headers(self):
        cleaned = clean_text("You answered thoughtfully.\nCore Traits: Calm and steady.")
        assert cleaned == "You answered thoughtfully.\n\nCore Traits: Calm and steady."

    def test_collapses_whitespace(self):
        cleaned = clean_text("Core Traits:\n\n\n\nYou   are   calm.   ")
        assert cleaned == "Core Traits:\n\nYou are calm."

    def test_removes_code_fences_and_empty_wrappers(self):
        cleaned = clean_text("```markdown\nCore Traits:\n<p> </p>Kind.\n```")
        assert cleaned == "Core Traits:\nKind."

    def test_idempotent(self):
        """Cleaning twice gives the same result as cleaning once."""
        samples = [
            generate_mock_analysis(),
            generate_mock_followup(),
            "Intro\n**Core Traits:** calm\n\n\n* one\n*two*\n## Key Strengths\n  spaced   out  ",
            "***Decision-Making Style:***\n***\nText",
        ]
        for raw in samples:
            once = clean_text(raw)
            assert clean_text(once) == once

    def test_empty(self):
        assert clean_text("") == ""


class TestSplitHeader:
    """Tests for header detection."""

    def test_known_with_inline_body(self):
        assert split_header("Direct Answer: Yes.") == ("Direct Answer", "Yes.")

    def test_known_without_colon(self):
        assert split_header("Growth Areas") == ("Growth Areas", "")

    def test_numbered(self):
        assert split_header("2. Key Strengths:") == ("Key Strengths", "")

    def test_theme_specific(self):
        assert split_header("Bankai: Senbonzakura", ["Bankai"]) == ("Bankai", "Senbonzakura")

    def test_generic_short_line(self):
        assert split_header("Hidden Talents:") == ("Hidden Talents", "")

    def test_sentence_is_not_header(self):
        assert split_header("You tend to think before acting.") is None
        assert split_header("this sentence ends with a colon:") is None


class TestParseSections:
    """Tests for sectioning cleaned text."""

    def test_sections_in_order(self):
        document = build_document(generate_mock_analysis())

        assert document.headings == [
            "Core Traits", "Decision-Making Style", "Key Strengths", "Growth Areas",
        ]
        assert all(section.body for section in document.sections)

    def test_preamble_kept_untitled(self):
        document = parse_sections("Thanks for playing.\n\nCore Traits:\nCalm.")

        assert document.sections[0] == Section(heading="", body="Thanks for playing.")
        assert document.sections[1] == Section(heading="Core Traits", body="Calm.")

    def test_followup_sections(self):
        document = build_document(generate_mock_followup(), FOLLOWUP_SECTIONS)
        assert document.headings == list(FOLLOWUP_SECTIONS)

    def test_extra_theme_sections(self):
        raw = generate_mock_analysis(["Core Traits", "Shikai", "Bankai"])
        document = build_document(raw, ["Shikai", "Bankai"])

        assert document.headings == ["Core Traits", "Shikai", "Bankai"]


class TestAnalysisDocument:
    """Tests for rendering."""

    def test_html_escapes_content(self):
        document = AnalysisDocument(sections=[Section("Core Traits", "<b>bold</b> & brave")])
        rendered = document.to_html()

        assert "<b>" not in rendered
        assert "&lt;b&gt;bold&lt;/b&gt; &amp; brave" in rendered
        assert rendered.startswith('<div class="analysis-section"><h3>Core Traits</h3>')

    def test_bullets_become_list(self):
        document = AnalysisDocument(sections=[Section("Key Strengths", "- Patience\n- Focus")])
        assert "<ul><li>Patience</li><li>Focus</li></ul>" in document.to_html()

    def test_empty_sections_skipped(self):
        document = AnalysisDocument(sections=[Section("", "  "), Section("Growth Areas", "Rest more.")])
        assert document.to_html().count("analysis-section") == 1

    def test_to_text(self):
        document = AnalysisDocument(sections=[Section("", "Hi."), Section("Core Traits", "Calm.")])
        assert document.to_text() == "Hi.\n\nCore Traits:\nCalm."
