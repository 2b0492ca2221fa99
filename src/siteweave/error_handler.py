"""User-facing error records and their logging."""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from siteweave.exceptions import ErrorKind, SiteweaveError

logger = logging.getLogger(__name__)

Severity = Literal["low", "medium", "high", "critical"]


class AppError(BaseModel):
    """An error as shown to the user and written to the log."""

    code: str
    message: str
    user_message: str
    severity: Severity = "medium"
    context: dict[str, Any] = Field(default_factory=dict)


def create_error(
    code: str,
    message: str,
    user_message: str,
    severity: Severity = "medium",
    context: dict[str, Any] | None = None,
) -> AppError:
    return AppError(
        code=code,
        message=message,
        user_message=user_message,
        severity=severity,
        context=dict(context or {}),
    )


def handle_file_processing_error(exc: BaseException, file_name: str | None = None) -> AppError:
    """Map a processing failure onto an :class:`AppError`.

    Tagged :class:`SiteweaveError` kinds get dedicated codes; anything else is
    reported as ``FILE_PROCESSING_ERROR`` with the file name in the context.
    """
    kind = exc.kind if isinstance(exc, SiteweaveError) else None
    message = str(exc) or exc.__class__.__name__

    if kind is ErrorKind.FILE_TOO_LARGE:
        return create_error(
            "FILE_TOO_LARGE",
            "File size exceeds limit",
            "The file is too large. Please use a file smaller than 50MB.",
        )
    if kind is ErrorKind.UNSUPPORTED_FILE_TYPE:
        return create_error(
            "UNSUPPORTED_FILE_TYPE",
            "Unsupported file type",
            "This file type is not supported. Please use PDF, PowerPoint, Word, or image files.",
        )
    if kind is ErrorKind.READ_TIMEOUT:
        return create_error(
            "READ_TIMEOUT",
            message,
            "Reading the file took too long. Please try again.",
            "high",
            {"fileName": file_name},
        )

    context: dict[str, Any] = {"fileName": file_name}
    if isinstance(exc, SiteweaveError):
        context.update(exc.context)
        context["kind"] = exc.kind.value
    return create_error(
        "FILE_PROCESSING_ERROR",
        message,
        f"Failed to process {file_name or 'the file'}. "
        "Please try a different file or contact support.",
        "medium",
        context,
    )


def log_error(error: AppError) -> None:
    if error.severity == "critical":
        level = logging.ERROR
    elif error.severity == "high":
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        "[%s] %s",
        error.code,
        error.message,
        extra={
            "user_message": error.user_message,
            "severity": error.severity,
            "error_context": error.context,
        },
    )
