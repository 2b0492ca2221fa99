"""Custom exceptions for siteweave."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Tag identifying which failure a SiteweaveError represents."""

    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    READ_TIMEOUT = "read_timeout"
    READ_FAILURE = "read_failure"
    PARSE_FAILURE = "parse_failure"
    WORKER_DEPENDENCY_LOAD_FAILURE = "worker_dependency_load_failure"
    WORKER_PROCESSING_FAILURE = "worker_processing_failure"


class SiteweaveError(Exception):
    """Base exception for siteweave operations.

    Carries a ``kind`` tag, the technical ``message`` and an optional
    ``context`` mapping with details such as the file name.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.PARSE_FAILURE

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})


class FileTooLargeError(SiteweaveError):
    """Uploaded file exceeds the size limit."""

    kind = ErrorKind.FILE_TOO_LARGE


class UnsupportedFileTypeError(SiteweaveError):
    """File extension is not in the supported set."""

    kind = ErrorKind.UNSUPPORTED_FILE_TYPE


class ReadTimeoutError(SiteweaveError):
    """Reading the file did not finish in time."""

    kind = ErrorKind.READ_TIMEOUT


class ReadFailureError(SiteweaveError):
    """I/O-level failure while reading the file."""

    kind = ErrorKind.READ_FAILURE


class ParseFailureError(SiteweaveError):
    """Malformed content that a parser could not handle."""

    kind = ErrorKind.PARSE_FAILURE


class WorkerDependencyLoadError(SiteweaveError):
    """PDF/OCR libraries could not be loaded by the worker."""

    kind = ErrorKind.WORKER_DEPENDENCY_LOAD_FAILURE


class WorkerProcessingError(SiteweaveError):
    """A single worker request failed during extraction, OCR or parsing."""

    kind = ErrorKind.WORKER_PROCESSING_FAILURE
