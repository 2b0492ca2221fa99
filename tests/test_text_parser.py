"""Tests for the plain text section parser."""

from __future__ import annotations

from siteweave.text_parser import detect_heading, parse_text_into_sections


def _names(sections) -> list[str]:
    return [section.name for section in sections]


class TestDetectHeading:
    """Tests for detect_heading."""

    def test_numbered_heading(self) -> None:
        assert detect_heading("3 Results") == "Results"
        assert detect_heading("2. Methods used") == "Methods used"

    def test_known_heading_prefix(self) -> None:
        assert detect_heading("Summary of findings") == "summary"
        assert detect_heading("EXECUTIVE SUMMARY") == "executive summary"

    def test_plain_sentence(self) -> None:
        assert detect_heading("This is a plain sentence.") is None


class TestParseTextIntoSections:
    """Tests for parse_text_into_sections."""

    def test_empty_text_yields_header_only(self) -> None:
        sections = parse_text_into_sections("", "report.txt")

        assert len(sections) == 1
        header = sections[0]
        assert header.id == "header"
        assert header.is_header is True
        assert header.icon == "📄"
        assert header.content[0].value == "<h1>report</h1>"

    def test_header_title_is_escaped(self) -> None:
        sections = parse_text_into_sections("", "a<b>.txt")
        assert sections[0].content[0].value == "<h1>a&lt;b&gt;</h1>"

    def test_splits_on_headings(self) -> None:
        text = (
            "Project plan\n"
            "Introduction\n"
            "This is the intro.\n"
            "2. Methods used\n"
            "We did things.\n"
            "- step one\n"
            "- step two\n"
            "Conclusion\n"
            "All done."
        )
        sections = parse_text_into_sections(text, "plan.txt")

        assert _names(sections) == ["Header", "Content", "Introduction", "Methods Used", "Conclusion"]
        assert sections[1].content[0].value == "<p>Project plan</p>"
        assert sections[2].icon == "📖"
        assert sections[3].icon == "🔬"
        assert sections[3].content[0].value == (
            "<p>We did things.</p><ul><li>step one</li><li>step two</li></ul>"
        )
        assert sections[4].icon == "✅"
        assert all(not section.is_header for section in sections[1:])

    def test_lines_before_first_heading_are_kept(self) -> None:
        sections = parse_text_into_sections("Prepared by the team\nConclusion\nAll done.", "x.txt")

        assert _names(sections) == ["Header", "Content", "Conclusion"]
        assert sections[1].content[0].value == "<p>Prepared by the team</p>"

    def test_known_heading_uses_vocabulary_entry(self) -> None:
        sections = parse_text_into_sections("Summary of findings\nIt went well.", "x.txt")
        assert _names(sections) == ["Header", "Summary"]
        assert sections[1].icon == "✅"

    def test_empty_heading_sections_are_dropped(self) -> None:
        sections = parse_text_into_sections("Introduction\nMethods\nbody text", "x.txt")
        assert _names(sections) == ["Header", "Methods"]

    def test_headings_without_content_fall_back_to_single_section(self) -> None:
        sections = parse_text_into_sections("Introduction\n\nConclusion\n", "x.txt")

        assert _names(sections) == ["Header", "Content"]
        assert sections[1].content[0].value == "<p>Introduction Conclusion</p>"

    def test_section_ids_are_unique(self) -> None:
        text = "Introduction\nfirst\nIntroduction\nsecond"
        sections = parse_text_into_sections(text, "x.txt")

        ids = [section.id for section in sections]
        assert len(ids) == 3
        assert len(set(ids)) == len(ids)
        assert ids[1].startswith("introduction-")

    def test_crlf_and_blank_lines(self) -> None:
        sections = parse_text_into_sections("Abstract\r\n\r\n  Short abstract.  \r\n", "x.txt")

        assert _names(sections) == ["Header", "Abstract"]
        assert sections[1].content[0].value == "<p>Short abstract.</p>"

    def test_any_non_blank_text_yields_two_sections(self) -> None:
        sections = parse_text_into_sections("just one line", "x.txt")
        assert len(sections) >= 2

    def test_numbered_heading_flushes_previous_section(self) -> None:
        text = "Overview\nfirst body\n2. Methodology\nsecond body"
        sections = parse_text_into_sections(text, "x.txt")

        assert [section.name for section in sections] == ["Header", "Overview", "Methodology"]
        assert sections[1].content[0].value == "<p>first body</p>"
        assert sections[2].content[0].value == "<p>second body</p>"
