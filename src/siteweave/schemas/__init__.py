"""Shared schemas for siteweave."""

from siteweave.schemas.messages import (
    WORKER_MESSAGE_ADAPTER,
    ErrorMessage,
    ImageResultMessage,
    ProcessDocumentRequest,
    ProgressMessage,
    ResultMessage,
    WorkerMessage,
)
from siteweave.schemas.sections import ContentBlock, HtmlBlock, ImageBlock, Section, TextBlock

__all__ = [
    "WORKER_MESSAGE_ADAPTER",
    "ContentBlock",
    "ErrorMessage",
    "HtmlBlock",
    "ImageBlock",
    "ImageResultMessage",
    "ProcessDocumentRequest",
    "ProgressMessage",
    "ResultMessage",
    "Section",
    "TextBlock",
    "WorkerMessage",
]
