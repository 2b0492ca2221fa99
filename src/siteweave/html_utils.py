"""Escaping, line formatting and DOM sanitizing helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_ESCAPE_RE = re.compile(r"[&<>\"']")

_BLANK_RE = re.compile(r"^\s*$")
_BULLET_RE = re.compile(r"^\s*[-•*]\s*(.+)")
_NUMBERED_RE = re.compile(r"^\s*(\d+)[)\.\-]\s*(.+)")
_LETTER_RE = re.compile(r"[A-Za-z]")
_UPPER_RE = re.compile(r"[A-Z]")

_SHOUT_RATIO = 0.7
_SHOUT_MAX_LENGTH = 200

DANGEROUS_TAGS = ("script", "object", "embed", "iframe", "form", "input", "button")


def escape_html(text: str) -> str:
    """Replace ``& < > " '`` with their HTML entities."""
    return _ESCAPE_RE.sub(lambda match: _HTML_ESCAPES[match.group(0)], text)


@dataclass
class _Block:
    kind: str  # "p", "ul" or "ol"
    items: list[str] = field(default_factory=list)


class _LineGrouper:
    """Accumulates paragraphs and list runs in input order."""

    def __init__(self) -> None:
        self.blocks: list[_Block] = []
        self._paragraph: list[str] = []
        self._list: _Block | None = None

    def flush_paragraph(self) -> None:
        if self._paragraph:
            self.blocks.append(_Block("p", [" ".join(self._paragraph)]))
            self._paragraph = []

    def flush_list(self) -> None:
        if self._list is not None:
            self.blocks.append(self._list)
            self._list = None

    def blank(self, match: re.Match[str]) -> None:
        self.flush_paragraph()
        self.flush_list()

    def list_item(self, kind: str, text: str) -> None:
        if self._list is None or self._list.kind != kind:
            self.flush_paragraph()
            self.flush_list()
            self._list = _Block(kind)
        self._list.items.append(text.strip())

    def unordered(self, match: re.Match[str]) -> None:
        self.list_item("ul", match.group(1))

    def ordered(self, match: re.Match[str]) -> None:
        self.list_item("ol", match.group(2))

    def paragraph_line(self, line: str) -> None:
        self.flush_list()
        self._paragraph.append(line)

    def finish(self) -> list[_Block]:
        self.flush_paragraph()
        self.flush_list()
        return self.blocks


# Evaluated top to bottom; the first matching rule consumes the line.
_LINE_RULES = (
    (_BLANK_RE, _LineGrouper.blank),
    (_BULLET_RE, _LineGrouper.unordered),
    (_NUMBERED_RE, _LineGrouper.ordered),
)


def format_content_lines(lines: Iterable[str]) -> str:
    """Render lines as escaped HTML paragraphs and lists.

    Blank lines separate paragraphs, ``-``/``•``/``*`` lines become unordered
    list items and ``1.``/``1)``/``1-`` lines ordered list items. Short
    paragraphs that are mostly uppercase are emphasised with ``<strong>``.
    """
    grouper = _LineGrouper()
    for line in lines:
        for pattern, action in _LINE_RULES:
            match = pattern.match(line)
            if match:
                action(grouper, match)
                break
        else:
            grouper.paragraph_line(line)

    return "".join(_render_block(block) for block in grouper.finish())


def _render_block(block: _Block) -> str:
    if block.kind in {"ul", "ol"}:
        items = "".join(f"<li>{escape_html(item)}</li>" for item in block.items)
        return f"<{block.kind}>{items}</{block.kind}>"

    text = block.items[0]
    if _is_shouting(text):
        return f"<p><strong>{escape_html(text)}</strong></p>"
    return f"<p>{escape_html(text)}</p>"


def _is_shouting(text: str) -> bool:
    letters = len(_LETTER_RE.findall(text))
    if not letters:
        return False
    ratio = len(_UPPER_RE.findall(text)) / letters
    return ratio > _SHOUT_RATIO and len(text) < _SHOUT_MAX_LENGTH


def find_document_root(soup: BeautifulSoup) -> Tag:
    """Return the ``<body>`` element, or the soup itself when there is none."""
    if soup.body:
        return soup.body
    return soup


def strip_scripts_and_handlers(tag: Tag) -> Tag:
    """Remove ``<script>`` elements and ``on*`` attributes in place."""
    for script in tag.find_all("script"):
        script.decompose()
    for element in [tag, *tag.find_all(True)]:
        element.attrs = {
            name: value
            for name, value in element.attrs.items()
            if not name.lower().startswith("on")
        }
    return tag


def sanitize_html_fragment(html: str) -> str:
    """Strip active content from an HTML fragment.

    Removes script-bearing and interactive elements, inline event handlers
    and ``javascript:`` links.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for element in soup.find_all(DANGEROUS_TAGS):
        # Nested matches go away with their decomposed ancestor.
        if not element.decomposed:
            element.decompose()
    for element in soup.find_all(True):
        cleaned = {}
        for name, value in element.attrs.items():
            if name.lower().startswith("on"):
                continue
            if name == "href" and str(value).strip().lower().startswith("javascript:"):
                continue
            cleaned[name] = value
        element.attrs = cleaned
    return soup.decode()
