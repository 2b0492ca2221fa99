"""PDF text-layer extraction and page rendering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Protocol

from siteweave.config import LINE_BREAK_THRESHOLD, MIN_ALPHA_RATIO, MIN_TEXT_LENGTH
from siteweave.exceptions import ParseFailureError

if TYPE_CHECKING:
    from types import ModuleType

_ALPHA_RE = re.compile(r"[A-Za-z]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class TextRun:
    """A run of text on a page and the y coordinate of its baseline."""

    text: str
    baseline: float


class PdfDocument(Protocol):
    page_count: int

    def text_runs(self, page_index: int) -> list[TextRun]: ...

    def render_page_png(self, page_index: int, scale: float) -> bytes: ...

    def close(self) -> None: ...


class PdfBackend(Protocol):
    def open(self, data: bytes) -> PdfDocument: ...


class PyMuPDFBackend:
    """PDF backend built on the ``pymupdf`` module."""

    def __init__(self, pymupdf: ModuleType) -> None:
        self._pymupdf = pymupdf

    def open(self, data: bytes) -> PdfDocument:
        try:
            document = self._pymupdf.open(stream=data, filetype="pdf")
        except (self._pymupdf.FileDataError, ValueError, RuntimeError) as exc:
            raise ParseFailureError(
                "Unable to open PDF document. The file may be corrupted or unsupported."
            ) from exc
        return _PyMuPDFDocument(self._pymupdf, document)


class _PyMuPDFDocument:
    def __init__(self, pymupdf: ModuleType, document) -> None:
        self._pymupdf = pymupdf
        self._document = document

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def text_runs(self, page_index: int) -> list[TextRun]:
        page = self._document.load_page(page_index)
        raw = page.get_text("dict")
        runs: list[TextRun] = []
        for block in raw.get("blocks", []):
            if block.get("type", 0) != 0:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text:
                        continue
                    _, baseline = span.get("origin", (0.0, 0.0))
                    runs.append(TextRun(text=text, baseline=float(baseline)))
        return runs

    def render_page_png(self, page_index: int, scale: float) -> bytes:
        page = self._document.load_page(page_index)
        pixmap = page.get_pixmap(matrix=self._pymupdf.Matrix(scale, scale))
        return pixmap.tobytes("png")

    def close(self) -> None:
        self._document.close()


def join_text_runs(runs: Iterable[TextRun]) -> str:
    """Join runs into page text, breaking lines where the baseline jumps."""
    parts: list[str] = []
    last_baseline: float | None = None
    for run in runs:
        if last_baseline is not None and abs(run.baseline - last_baseline) > LINE_BREAK_THRESHOLD:
            parts.append("\n")
        parts.append(run.text + " ")
        last_baseline = run.baseline
    return "".join(parts)


def alpha_ratio(text: str) -> float:
    """Share of ASCII letters among non-whitespace characters (0 when empty)."""
    non_space = len(_WHITESPACE_RE.sub("", text))
    if non_space == 0:
        return 0.0
    return len(_ALPHA_RE.findall(text)) / non_space


def needs_ocr(text: str) -> bool:
    """Whether extracted text is too sparse or noisy to trust."""
    return alpha_ratio(text) < MIN_ALPHA_RATIO or len(_WHITESPACE_RE.sub("", text)) < MIN_TEXT_LENGTH
