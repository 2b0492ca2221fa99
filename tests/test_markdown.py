"""Tests for the Markdown section parser and converter."""

from __future__ import annotations

from siteweave.markdown import convert_markdown_to_html, parse_markdown_into_sections

DOCUMENT = """# Title

Intro para

## Background
Some **bold** text

* one
* two

## Empty

## Links
[site](https://example.com) and [bad](javascript:alert(1))
"""


class TestParseMarkdownIntoSections:
    """Tests for parse_markdown_into_sections."""

    def test_headed_document(self) -> None:
        sections = parse_markdown_into_sections(DOCUMENT, "doc.md")

        assert [section.name for section in sections] == ["Header", "Title", "Background", "Links"]
        assert [section.id for section in sections] == ["header", "section-1", "section-2", "section-4"]
        assert sections[0].icon == "📝"
        assert sections[0].content[0].value == "<h1>Title</h1>"
        assert sections[1].content[0].value == "<p>Intro para</p>"
        assert sections[2].icon == "📚"
        assert sections[2].content[0].value == (
            "<p>Some <strong>bold</strong> text</p><ul><li>one</li><li>two</li></ul>"
        )

    def test_links_are_rendered_and_javascript_neutralized(self) -> None:
        sections = parse_markdown_into_sections(DOCUMENT, "doc.md")
        links = sections[-1].content[0].value

        assert '<a href="https://example.com" target="_blank">site</a>' in links
        assert '<a href="#" target="_blank">bad</a>' in links
        assert "javascript:" not in links

    def test_no_headings_uses_filename_and_content_section(self) -> None:
        sections = parse_markdown_into_sections("just text", "notes.md")

        assert sections[0].content[0].value == "<h1>notes</h1>"
        assert len(sections) == 2
        assert sections[1].id == "content"
        assert sections[1].content[0].value == "<p>just text</p>"

    def test_preamble_before_first_heading_is_kept(self) -> None:
        sections = parse_markdown_into_sections("Intro text\n# Head\nBody", "x.md")

        assert [section.name for section in sections] == ["Header", "Content", "Head"]
        assert sections[0].content[0].value == "<h1>Head</h1>"
        assert sections[1].content[0].value == "<p>Intro text</p>"

    def test_section_name_is_truncated(self) -> None:
        heading = "A heading that is clearly longer than thirty characters"
        sections = parse_markdown_into_sections(f"# Title\n## {heading}\nbody", "x.md")

        assert sections[-1].name == heading[:30]

    def test_title_is_escaped(self) -> None:
        sections = parse_markdown_into_sections("# <script>\nbody", "x.md")
        assert sections[0].content[0].value == "<h1>&lt;script&gt;</h1>"


class TestConvertMarkdownToHtml:
    """Tests for convert_markdown_to_html."""

    def test_input_is_escaped(self) -> None:
        assert convert_markdown_to_html("<b>x</b>") == "<p>&lt;b&gt;x&lt;/b&gt;</p>"

    def test_emphasis(self) -> None:
        assert convert_markdown_to_html("*it* and _u_") == "<p><em>it</em> and <em>u</em></p>"
        assert convert_markdown_to_html("__strong__") == "<p><strong>strong</strong></p>"

    def test_snake_case_is_not_emphasized(self) -> None:
        assert convert_markdown_to_html("snake_case_name") == "<p>snake_case_name</p>"

    def test_numbered_items_join_unordered_list(self) -> None:
        assert convert_markdown_to_html("1. first\n2. second") == (
            "<ul><li>first</li><li>second</li></ul>"
        )

    def test_blank_lines_split_paragraphs(self) -> None:
        assert convert_markdown_to_html("one\n\ntwo") == "<p>one</p><p>two</p>"
