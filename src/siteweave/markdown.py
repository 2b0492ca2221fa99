"""Split Markdown into sections and convert its inline syntax to HTML."""

from __future__ import annotations

import re

from siteweave.html_utils import escape_html
from siteweave.schemas import Section, TextBlock
from siteweave.sections import clean_file_name, detect_section_icon, header_section

_HEADING_RE = re.compile(r"^#{1,3}\s+(.+)$", re.MULTILINE)
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")
_LIST_ITEM_RE = re.compile(r"^(?:\*|\d+\.) (.+)$")

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_BOLD_UNDERSCORE_RE = re.compile(r"(?<!\w)__(.+?)__(?!\w)")
_ITALIC_RE = re.compile(r"\*(.+?)\*")
_ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(.+?)_(?!\w)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

_MAX_NAME_LENGTH = 30


def parse_markdown_into_sections(markdown: str, file_name: str) -> list[Section]:
    """Split Markdown on level 1-3 headings.

    The first heading titles the header section. Each heading with a
    non-blank body becomes its own section; text before the first heading is
    kept in a "Content" section.
    """
    parts = _HEADING_RE.split(markdown)
    preamble, pairs = parts[0], list(zip(parts[1::2], parts[2::2]))

    title = pairs[0][0].strip() if pairs else clean_file_name(file_name)
    sections = [header_section(title, icon="📝")]

    if pairs and preamble.strip():
        sections.append(_content_section(preamble))

    for index, (heading, body) in enumerate(pairs, start=1):
        heading = heading.strip()
        if not heading or not body.strip():
            continue
        sections.append(
            Section(
                id=f"section-{index}",
                icon=detect_section_icon(heading.lower()),
                name=heading[:_MAX_NAME_LENGTH],
                content=[TextBlock(value=convert_markdown_to_html(body))],
            )
        )

    if len(sections) == 1:
        sections.append(_content_section(markdown))

    return sections


def _content_section(markdown: str) -> Section:
    return Section(
        id="content",
        icon="📄",
        name="Content",
        content=[TextBlock(value=convert_markdown_to_html(markdown))],
    )


def convert_markdown_to_html(markdown: str) -> str:
    """Convert a Markdown body to escaped HTML.

    Blank-line separated runs become paragraphs, ``* item`` and ``1. item``
    lines become list items grouped into ``<ul>``, and bold, italic and link
    syntax is rendered inline.
    """
    text = markdown.replace("\r\n", "\n").strip()
    blocks = [block.strip("\n") for block in _BLANK_LINE_RE.split(text)]
    return "".join(_convert_block(block) for block in blocks if block.strip())


def _convert_block(block: str) -> str:
    html: list[str] = []
    paragraph: list[str] = []
    items: list[str] = []

    def flush_paragraph() -> None:
        if paragraph:
            joined = "\n".join(paragraph)
            html.append(f"<p>{_convert_inline(joined)}</p>")
            paragraph.clear()

    def flush_items() -> None:
        if items:
            html.append("<ul>" + "".join(f"<li>{_convert_inline(item)}</li>" for item in items) + "</ul>")
            items.clear()

    for line in block.split("\n"):
        match = _LIST_ITEM_RE.match(line)
        if match:
            flush_paragraph()
            items.append(match.group(1))
        else:
            flush_items()
            paragraph.append(line)

    flush_paragraph()
    flush_items()
    return "".join(html)


def _convert_inline(text: str) -> str:
    html = escape_html(text)
    html = _BOLD_RE.sub(r"<strong>\1</strong>", html)
    html = _BOLD_UNDERSCORE_RE.sub(r"<strong>\1</strong>", html)
    html = _ITALIC_RE.sub(r"<em>\1</em>", html)
    html = _ITALIC_UNDERSCORE_RE.sub(r"<em>\1</em>", html)
    return _LINK_RE.sub(_render_link, html)


def _render_link(match: re.Match[str]) -> str:
    label, href = match.group(1), match.group(2).strip()
    if href.lower().startswith("javascript:"):
        href = "#"
    return f'<a href="{href}" target="_blank">{label}</a>'
