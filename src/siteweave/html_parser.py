"""Parse an HTML document into website sections."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field

from siteweave.exceptions import ParseFailureError
from siteweave.html_utils import (
    find_document_root,
    sanitize_html_fragment,
    strip_scripts_and_handlers,
)
from siteweave.schemas import HtmlBlock, Section
from siteweave.sections import (
    clean_file_name,
    detect_section_icon,
    header_section,
    semantic_icon,
)

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise ParseFailureError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_HEADING_RE = re.compile(r"^h[1-6]$")
SEMANTIC_TAGS = ("header", "main", "section", "article", "aside", "nav", "footer")
_MAX_NAME_LENGTH = 30


@dataclass
class _Candidate:
    """An element that will become one section."""

    element: Tag
    kind: str
    following: list[Tag] = field(default_factory=list)


def parse_html_into_sections(html_content: str, file_name: str) -> list[Section]:
    """Build sections from semantic containers, headings, or the whole body.

    Strategies are tried in that order and the first one that finds anything
    wins. Emitted markup has scripts and inline event handlers removed.
    """
    soup = BeautifulSoup(html_content, "lxml")
    title = _extract_title(soup) or clean_file_name(file_name)
    sections = [header_section(title, icon="🌐")]

    candidates = (
        _find_semantic_elements(soup)
        or _find_heading_elements(soup)
        or _find_body_element(soup)
    )

    for index, candidate in enumerate(candidates):
        # The leading <h1> already titles the header section.
        if index == 0 and candidate.element.name == "h1":
            continue
        html = _extract_candidate_html(candidate)
        if not html.strip():
            continue
        name, icon = _describe_candidate(candidate, index)
        sections.append(
            Section(
                id=f"html-section-{index}",
                icon=icon,
                name=name,
                content=[HtmlBlock(value=html, allow_raw_html=True)],
            )
        )

    if len(sections) == 1:
        body_html = soup.body.decode_contents() if soup.body else html_content
        sections.append(
            Section(
                id="content",
                icon="📄",
                name="Content",
                content=[
                    HtmlBlock(value=sanitize_html_fragment(body_html), allow_raw_html=True)
                ],
            )
        )

    return sections


def _extract_title(soup: BeautifulSoup) -> str | None:
    if soup.title:
        title = soup.title.get_text(" ", strip=True)
        if title:
            return title
    h1 = soup.find("h1")
    if h1:
        heading = h1.get_text(" ", strip=True)
        if heading:
            return heading
    return None


def _find_semantic_elements(soup: BeautifulSoup) -> list[_Candidate]:
    return [
        _Candidate(element=element, kind="semantic")
        for element in soup.find_all(SEMANTIC_TAGS)
        if element.get_text(strip=True)
    ]


def _find_heading_elements(soup: BeautifulSoup) -> list[_Candidate]:
    return [
        _Candidate(element=heading, kind="heading", following=_collect_following(heading))
        for heading in soup.find_all(_HEADING_RE)
        if heading.get_text(strip=True)
    ]


def _find_body_element(soup: BeautifulSoup) -> list[_Candidate]:
    root = find_document_root(soup)
    if not root.get_text(strip=True):
        return []
    return [_Candidate(element=root, kind="body")]


def _collect_following(heading: Tag) -> list[Tag]:
    """Element siblings after ``heading`` up to the next heading of equal or higher rank."""
    level = int(heading.name[1])
    following: list[Tag] = []
    for sibling in heading.next_siblings:
        if not isinstance(sibling, Tag) or sibling.name == "script":
            continue
        if _HEADING_RE.match(sibling.name) and int(sibling.name[1]) <= level:
            break
        following.append(sibling)
    return following


def _extract_candidate_html(candidate: _Candidate) -> str:
    clone = strip_scripts_and_handlers(copy.copy(candidate.element))
    parts = [clone.decode_contents()]
    for sibling in candidate.following:
        parts.append(str(strip_scripts_and_handlers(copy.copy(sibling))))
    return "".join(parts)


def _describe_candidate(candidate: _Candidate, index: int) -> tuple[str, str]:
    if candidate.kind == "semantic":
        tag_name = candidate.element.name
        return tag_name.capitalize(), semantic_icon(tag_name)
    if candidate.kind == "heading":
        text = candidate.element.get_text(" ", strip=True)
        name = text[:_MAX_NAME_LENGTH] + "..." if len(text) > _MAX_NAME_LENGTH else text
        return name, detect_section_icon(text.lower())
    return f"Section {index + 1}", "📄"
