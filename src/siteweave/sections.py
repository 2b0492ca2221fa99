"""Section building blocks shared by the parsers."""

from __future__ import annotations

import base64
import mimetypes
import re
import time
import uuid

from siteweave.html_utils import escape_html
from siteweave.schemas import ImageBlock, Section, TextBlock

DEFAULT_ICON = "📄"

# Ordered: the first keyword contained in the text wins.
_KEYWORD_ICONS = (
    ("introduction", "📖"),
    ("overview", "📖"),
    ("objective", "🎯"),
    ("goal", "🎯"),
    ("method", "🔬"),
    ("result", "📊"),
    ("finding", "📊"),
    ("conclusion", "✅"),
    ("summary", "✅"),
    ("question", "❓"),
    ("q&a", "❓"),
    ("thank", "🙏"),
    ("reference", "📚"),
    ("bibliography", "📚"),
    ("contact", "📧"),
    ("background", "📚"),
    ("discussion", "💬"),
    ("analysis", "📈"),
    ("data", "📊"),
    ("recommendation", "💡"),
    ("future", "🔮"),
    ("challenge", "⚠️"),
    ("solution", "💡"),
)

_SEMANTIC_ICONS = {
    "header": "🏠",
    "main": "📄",
    "section": "📝",
    "article": "📰",
    "aside": "📌",
    "nav": "🧭",
    "footer": "📧",
}

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9]+")

_FALLBACK_MESSAGE = (
    "<p>We couldn't extract text from your file automatically, but you can still "
    "use the editor to add your content!</p><p>Use the tools below to:</p>"
    "<ul><li>Add text sections</li><li>Upload images</li>"
    "<li>Format your content</li><li>Customize the design</li></ul>"
)
_PDF_PLACEHOLDER = (
    "<p>PDF processing is being implemented. For now, you can add your content "
    "manually using the editor below.</p><p>Features coming soon:</p>"
    "<ul><li>Text extraction from PDF pages</li><li>Image extraction</li>"
    "<li>Automatic section detection</li><li>OCR for scanned documents</li></ul>"
)
_DOCX_PLACEHOLDER = (
    "<p>Word document processing is coming soon!</p><p>For now, you can:</p>"
    "<ul><li>Save your document as PDF and upload it</li>"
    "<li>Copy and paste your content into a text file</li>"
    "<li>Use the editor below to manually add your content</li></ul>"
)


def clean_file_name(file_name: str) -> str:
    """Drop the last extension from a file name."""
    return _EXTENSION_RE.sub("", file_name)


def detect_section_icon(text: str) -> str:
    """Pick an icon for lowercase ``text`` by keyword."""
    for keyword, icon in _KEYWORD_ICONS:
        if keyword in text:
            return icon
    return DEFAULT_ICON


def semantic_icon(tag_name: str) -> str:
    return _SEMANTIC_ICONS.get(tag_name, DEFAULT_ICON)


def title_case(text: str) -> str:
    """Capitalize the first letter of every word, leaving the rest untouched."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def unique_section_id(label: str) -> str:
    """Build a collision-resistant id from a heading label.

    The slug keeps only ``a-z``, ``0-9`` and single dashes.
    """
    slug = _SLUG_INVALID_RE.sub("-", label.lower()).strip("-") or "section"
    return f"{slug}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:4]}"


def header_section(title: str, *, icon: str = DEFAULT_ICON) -> Section:
    """Header section holding the escaped document title."""
    return Section(
        id="header",
        icon=icon,
        name="Header",
        is_header=True,
        content=[TextBlock(value=f"<h1>{escape_html(title)}</h1>")],
    )


def create_basic_sections(file_name: str) -> list[Section]:
    """Generic fallback used when a file could not be processed."""
    return [
        header_section(clean_file_name(file_name)),
        Section(
            id="content",
            icon="📝",
            name="Content",
            content=[TextBlock(value=_FALLBACK_MESSAGE)],
        ),
    ]


def create_pdf_placeholder_sections(file_name: str) -> list[Section]:
    return [
        header_section(clean_file_name(file_name)),
        Section(
            id="content",
            icon="📝",
            name="Content",
            content=[TextBlock(value=_PDF_PLACEHOLDER)],
        ),
    ]


def create_docx_placeholder_sections(file_name: str) -> list[Section]:
    return [
        header_section(clean_file_name(file_name), icon="📝"),
        Section(
            id="content",
            icon=DEFAULT_ICON,
            name="Document Content",
            content=[TextBlock(value=_DOCX_PLACEHOLDER)],
        ),
    ]


def create_image_sections(data_url: str, file_name: str) -> list[Section]:
    """Header, image and description skeleton for an uploaded image."""
    return [
        header_section(clean_file_name(file_name), icon="🖼️"),
        Section(
            id="image-section",
            icon="📷",
            name="Image",
            content=[
                ImageBlock(url=data_url, caption="Click to edit or replace this image")
            ],
        ),
        Section(
            id="description",
            icon="📝",
            name="Description",
            content=[
                TextBlock(
                    value=(
                        "<p>Add a description of your image here. You can edit this "
                        "text or add more sections using the editor.</p>"
                    )
                )
            ],
        ),
    ]


def build_data_url(data: bytes, file_name: str) -> str:
    """Encode ``data`` as a base64 data URL typed from the file name."""
    mime_type, _ = mimetypes.guess_type(file_name)
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or 'application/octet-stream'};base64,{encoded}"
