"""Test setup for siteweave."""

from __future__ import annotations

import io
import sys
import zipfile
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
PRESENTATION_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"


def _slide_xml(texts: list[str]) -> str:
    paragraphs = "".join(f"<a:p><a:r><a:t>{text}</a:t></a:r></a:p>" for text in texts)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:sld xmlns:a="{DRAWING_NS}" xmlns:p="{PRESENTATION_NS}">'
        f"<p:cSld><p:spTree><p:sp><p:txBody>{paragraphs}</p:txBody></p:sp></p:spTree></p:cSld>"
        "</p:sld>"
    )


@pytest.fixture
def make_pptx() -> Callable[..., bytes]:
    """Build a minimal .pptx archive from slide and note texts keyed by slide number."""

    def build(slides: dict[int, list[str]], notes: dict[int, list[str]] | None = None) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("[Content_Types].xml", "<Types/>")
            for number, texts in slides.items():
                archive.writestr(f"ppt/slides/slide{number}.xml", _slide_xml(texts))
            for number, texts in (notes or {}).items():
                archive.writestr(f"ppt/notesSlides/notesSlide{number}.xml", _slide_xml(texts))
        return buffer.getvalue()

    return build
