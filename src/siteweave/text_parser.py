"""Split plain text into sections using heading heuristics.

Lines that come before the first detected heading are kept in a leading
"Content" section rather than dropped.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import Callable

from siteweave.html_utils import format_content_lines
from siteweave.schemas import Section, TextBlock
from siteweave.sections import (
    clean_file_name,
    detect_section_icon,
    header_section,
    title_case,
    unique_section_id,
)

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_NUMBERED_HEADING_RE = re.compile(r"^\d+\.?\s+(.+)")
_LEADING_NUMBER_RE = re.compile(r"^\d+\.?\s*")

KNOWN_HEADINGS = (
    "abstract",
    "introduction",
    "background",
    "methods",
    "methodology",
    "results",
    "discussion",
    "conclusion",
    "references",
    "acknowledgments",
    "summary",
    "objectives",
    "materials",
    "analysis",
    "findings",
    "recommendations",
    "future work",
    "limitations",
    "appendix",
    "overview",
    "approach",
    "implementation",
    "evaluation",
    "related work",
    "executive summary",
    "business objectives",
    "scope",
    "goals",
    "purpose",
)


def _numbered_heading(line: str) -> str | None:
    match = _NUMBERED_HEADING_RE.match(line)
    return match.group(1).strip() if match else None


def _known_heading(line: str) -> str | None:
    lowered = line.lower()
    for heading in KNOWN_HEADINGS:
        if lowered.startswith(heading):
            return heading
    return None


# Tried in order; the first rule returning a candidate marks a heading.
HEADING_RULES: tuple[Callable[[str], str | None], ...] = (
    _numbered_heading,
    _known_heading,
)


@dataclass
class _PendingSection:
    section: Section
    lines: list[str] = field(default_factory=list)

    def finish(self) -> Section | None:
        if not self.lines:
            return None
        self.section.content.append(TextBlock(value=format_content_lines(self.lines)))
        return self.section


def detect_heading(line: str) -> str | None:
    """Return the heading text if ``line`` looks like a section heading."""
    for rule in HEADING_RULES:
        candidate = rule(line)
        if candidate:
            return candidate
    return None


def parse_text_into_sections(text: str, file_name: str) -> list[Section]:
    """Split raw text into a header plus one section per detected heading.

    Lines before the first heading are kept in a leading "Content" section.
    When no section ends up with content, all lines are placed in a single
    "Content" section so any non-blank input yields at least two sections.
    """
    sections = [header_section(clean_file_name(file_name))]
    lines = [line.strip() for line in _LINE_SPLIT_RE.split(text) if line.strip()]

    current = _PendingSection(_content_section())
    for line in lines:
        heading = detect_heading(line)
        if heading is None:
            current.lines.append(line)
            continue

        finished = current.finish()
        if finished is not None:
            sections.append(finished)
        current = _PendingSection(_heading_section(heading))

    finished = current.finish()
    if finished is not None:
        sections.append(finished)

    if len(sections) == 1 and lines:
        fallback = _content_section()
        fallback.content.append(TextBlock(value=format_content_lines(lines)))
        sections.append(fallback)

    return sections


def _heading_section(heading: str) -> Section:
    cleaned = _LEADING_NUMBER_RE.sub("", heading).strip() or heading
    return Section(
        id=unique_section_id(cleaned),
        icon=detect_section_icon(cleaned.lower()),
        name=title_case(cleaned),
    )


def _content_section() -> Section:
    return Section(id=f"content-{int(time.time() * 1000)}", icon="📄", name="Content")
