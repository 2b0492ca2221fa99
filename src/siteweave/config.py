"""Local configuration for siteweave."""

from __future__ import annotations

import os


DEFAULT_MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024
DEFAULT_READ_TIMEOUT_S = 30.0
DEFAULT_OCR_LANGUAGES = "eng"
DEFAULT_OCR_RENDER_SCALE = 2.0
DEFAULT_WORKER_POOL_SIZE = 1
DEFAULT_LOG_LEVEL = "INFO"

# Heuristics for PDF text quality and line detection.
LINE_BREAK_THRESHOLD = 5.0
MIN_ALPHA_RATIO = 0.5
MIN_TEXT_LENGTH = 100
LARGE_FILE_WARNING_BYTES = 10 * 1024 * 1024
MAX_FILE_NAME_LENGTH = 255

SITEWEAVE_MAX_FILE_SIZE_BYTES = int(os.getenv("SITEWEAVE_MAX_FILE_SIZE_BYTES", str(DEFAULT_MAX_FILE_SIZE_BYTES)))
SITEWEAVE_READ_TIMEOUT_S = float(os.getenv("SITEWEAVE_READ_TIMEOUT_S", str(DEFAULT_READ_TIMEOUT_S)))
SITEWEAVE_OCR_LANGUAGES = os.getenv("SITEWEAVE_OCR_LANGUAGES", DEFAULT_OCR_LANGUAGES)
SITEWEAVE_OCR_RENDER_SCALE = float(os.getenv("SITEWEAVE_OCR_RENDER_SCALE", str(DEFAULT_OCR_RENDER_SCALE)))
SITEWEAVE_OCR_IMAGES = os.getenv("SITEWEAVE_OCR_IMAGES", "false").lower() == "true"
SITEWEAVE_WORKER_POOL_SIZE = int(os.getenv("SITEWEAVE_WORKER_POOL_SIZE", str(DEFAULT_WORKER_POOL_SIZE)))
SITEWEAVE_LOG_LEVEL = os.getenv("SITEWEAVE_LOG_LEVEL", DEFAULT_LOG_LEVEL)
