"""Extract slide text from PowerPoint (.pptx) archives into sections."""

from __future__ import annotations

import io
import re
import zipfile
from dataclasses import dataclass

from lxml import etree

from siteweave.exceptions import ParseFailureError
from siteweave.html_utils import escape_html
from siteweave.schemas import Section, TextBlock
from siteweave.sections import DEFAULT_ICON, clean_file_name, detect_section_icon, header_section

_DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
_TEXT_TAG = f"{{{_DRAWING_NS}}}t"

_SLIDE_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
_NOTES_RE = re.compile(r"^ppt/notesSlides/notesSlide(\d+)\.xml$")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_TITLE_SPLIT_RE = re.compile(r"[.!?]\s+")
_WHITESPACE_RE = re.compile(r"\s+")

_TITLE_SLIDE_MAX_LENGTH = 200
_SHORT_LINE_LENGTH = 50
_MAX_NAME_LENGTH = 30
_SENTENCES_PER_PARAGRAPH = 3
_LONG_SENTENCE_LENGTH = 150

# Ordered: the first keyword contained in the slide text wins.
_KEYWORD_NAMES = (
    ("introduction", "Introduction"),
    ("overview", "Overview"),
    ("objective", "Objectives"),
    ("goal", "Goals"),
    ("method", "Methods"),
    ("result", "Results"),
    ("finding", "Findings"),
    ("conclusion", "Conclusion"),
    ("summary", "Summary"),
    ("question", "Questions"),
    ("q&a", "Q&A"),
    ("thank", "Thank You"),
    ("reference", "References"),
    ("bibliography", "Bibliography"),
    ("contact", "Contact"),
    ("background", "Background"),
    ("discussion", "Discussion"),
    ("analysis", "Analysis"),
    ("data", "Data"),
    ("recommendation", "Recommendations"),
    ("future", "Future Work"),
    ("challenge", "Challenges"),
    ("solution", "Solutions"),
)

_EMPTY_DECK_MESSAGE = (
    "<p>No text content could be extracted from this PowerPoint file. The file may "
    "contain primarily images or complex layouts.</p><p>You can still add your own "
    "content using the editor below.</p>"
)


@dataclass(frozen=True)
class SlideText:
    number: int
    text: str


def extract_slide_text(xml: bytes) -> str:
    """Concatenate the ``a:t`` text runs of a slide or notes part."""
    try:
        root = etree.fromstring(xml)
    except etree.XMLSyntaxError as exc:
        raise ParseFailureError(f"Malformed slide XML: {exc}") from exc
    runs = [element.text or "" for element in root.iter(_TEXT_TAG)]
    return _WHITESPACE_RE.sub(" ", " ".join(runs)).strip()


def read_presentation(data: bytes) -> tuple[list[SlideText], dict[int, str]]:
    """Return the non-empty slides in order and speaker notes keyed by slide number."""
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            slides = _read_parts(archive, _SLIDE_RE)
            notes = {part.number: part.text for part in _read_parts(archive, _NOTES_RE)}
    except zipfile.BadZipFile as exc:
        raise ParseFailureError(
            "Failed to process PowerPoint file. The file may be corrupted or in an unsupported format."
        ) from exc
    return slides, notes


def _read_parts(archive: zipfile.ZipFile, pattern: re.Pattern[str]) -> list[SlideText]:
    numbered = []
    for name in archive.namelist():
        match = pattern.match(name)
        if match:
            numbered.append((int(match.group(1)), name))

    parts = []
    for number, name in sorted(numbered):
        text = extract_slide_text(archive.read(name))
        if text:
            parts.append(SlideText(number=number, text=text))
    return parts


def parse_pptx_into_sections(data: bytes, file_name: str) -> list[Section]:
    """Turn a presentation into a header plus one section per slide.

    A short first slide is treated as the title slide and supplies the
    header text. Speaker notes are appended to their slide's section.
    """
    slides, notes = read_presentation(data)
    title = clean_file_name(file_name)
    if slides and len(slides[0].text) < _TITLE_SLIDE_MAX_LENGTH:
        title = slides.pop(0).text

    sections = [header_section(title, icon="📊")]
    for slide in slides:
        name, icon = _describe_slide(slide)
        content = format_slide_content(slide.text)
        note = notes.get(slide.number)
        if note:
            content += f"<hr><p><em>Speaker Notes: {escape_html(note)}</em></p>"
        sections.append(
            Section(
                id=f"slide-{slide.number}",
                icon=icon,
                name=name,
                content=[TextBlock(value=content)],
            )
        )

    if len(sections) == 1:
        sections.append(
            Section(
                id="content",
                icon=DEFAULT_ICON,
                name="Content",
                content=[TextBlock(value=_EMPTY_DECK_MESSAGE)],
            )
        )
    return sections


def _describe_slide(slide: SlideText) -> tuple[str, str]:
    first_line = next((line for line in _TITLE_SPLIT_RE.split(slide.text) if line.strip()), "")
    if not first_line or len(first_line) >= _SHORT_LINE_LENGTH:
        return f"Slide {slide.number}", DEFAULT_ICON

    lowered = slide.text.lower()
    for keyword, name in _KEYWORD_NAMES:
        if keyword in lowered:
            return name, detect_section_icon(lowered)
    return first_line[:_MAX_NAME_LENGTH].strip(), detect_section_icon(lowered)


def format_slide_content(text: str) -> str:
    """Group sentences into paragraphs of three, breaking early after long ones."""
    paragraphs: list[str] = []
    current: list[str] = []
    for sentence in _SENTENCE_SPLIT_RE.split(text):
        if not sentence.strip():
            continue
        current.append(sentence)
        if len(current) == _SENTENCES_PER_PARAGRAPH or len(sentence) > _LONG_SENTENCE_LENGTH:
            paragraphs.append(" ".join(current))
            current = []
    if current:
        paragraphs.append(" ".join(current))
    return "".join(f"<p>{escape_html(paragraph)}</p>" for paragraph in paragraphs)
