"""siteweave: turn uploaded documents into editable website sections."""

from siteweave.error_handler import AppError, handle_file_processing_error, log_error
from siteweave.exceptions import (
    ErrorKind,
    FileTooLargeError,
    ParseFailureError,
    ReadFailureError,
    ReadTimeoutError,
    SiteweaveError,
    UnsupportedFileTypeError,
    WorkerDependencyLoadError,
    WorkerProcessingError,
)
from siteweave.file_io import UploadedFile
from siteweave.html_parser import parse_html_into_sections
from siteweave.markdown import convert_markdown_to_html, parse_markdown_into_sections
from siteweave.pptx_parser import parse_pptx_into_sections
from siteweave.processor import process_file
from siteweave.schemas import ContentBlock, HtmlBlock, ImageBlock, Section, TextBlock
from siteweave.sections import create_basic_sections, create_image_sections
from siteweave.text_parser import parse_text_into_sections
from siteweave.validation import FileValidationResult, validate_file
from siteweave.worker import DocumentWorker, DocumentWorkerClient, WorkerPool, WorkerResult

__all__ = [
    "AppError",
    "ContentBlock",
    "DocumentWorker",
    "DocumentWorkerClient",
    "ErrorKind",
    "FileTooLargeError",
    "FileValidationResult",
    "HtmlBlock",
    "ImageBlock",
    "ParseFailureError",
    "ReadFailureError",
    "ReadTimeoutError",
    "Section",
    "SiteweaveError",
    "TextBlock",
    "UnsupportedFileTypeError",
    "UploadedFile",
    "WorkerDependencyLoadError",
    "WorkerPool",
    "WorkerProcessingError",
    "WorkerResult",
    "convert_markdown_to_html",
    "create_basic_sections",
    "create_image_sections",
    "handle_file_processing_error",
    "log_error",
    "parse_html_into_sections",
    "parse_markdown_into_sections",
    "parse_pptx_into_sections",
    "parse_text_into_sections",
    "process_file",
    "validate_file",
]
