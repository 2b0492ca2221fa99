"""OCR engine wrapper around pytesseract."""

from __future__ import annotations

import io
import re
from typing import TYPE_CHECKING, Callable, Protocol

from siteweave.config import SITEWEAVE_OCR_LANGUAGES
from siteweave.exceptions import WorkerProcessingError

if TYPE_CHECKING:
    from types import ModuleType

ProgressCallback = Callable[[float], None]

# ISO 639-1 hints mapped to Tesseract language packs.
_LANGUAGE_CODES = {
    "en": "eng",
    "es": "spa",
    "fr": "fra",
    "de": "deu",
    "it": "ita",
    "pt": "por",
}
_LANGUAGE_SPLIT_RE = re.compile(r"[,+\s]+")


class OcrEngine(Protocol):
    def recognize(self, image: bytes, on_progress: ProgressCallback | None = None) -> str: ...


def tesseract_languages(value: str) -> str:
    """Normalize ``"en,fr"`` or ``"eng+fra"`` into a Tesseract language string."""
    codes = [code for code in _LANGUAGE_SPLIT_RE.split(value.strip()) if code]
    if not codes:
        return "eng"
    return "+".join(_LANGUAGE_CODES.get(code.lower(), code) for code in codes)


class TesseractEngine:
    """Recognize text in PNG/JPEG/TIFF bytes with Tesseract.

    pytesseract reports no intermediate progress, so the callback only sees
    the start (0.0) and the end (1.0) of each recognition.
    """

    def __init__(
        self,
        pytesseract: ModuleType,
        image_module: ModuleType,
        *,
        languages: str = SITEWEAVE_OCR_LANGUAGES,
    ) -> None:
        self._pytesseract = pytesseract
        self._image = image_module
        self.languages = tesseract_languages(languages)

    def recognize(self, image: bytes, on_progress: ProgressCallback | None = None) -> str:
        if on_progress:
            on_progress(0.0)
        try:
            with self._image.open(io.BytesIO(image)) as picture:
                text = self._pytesseract.image_to_string(picture, lang=self.languages)
        except (self._pytesseract.TesseractError, OSError) as exc:
            raise WorkerProcessingError(f"OCR failed: {exc}") from exc
        if on_progress:
            on_progress(1.0)
        return text or ""
