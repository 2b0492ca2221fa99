"""Route an uploaded file to the matching parser."""

from __future__ import annotations

import logging

from siteweave.config import (
    SITEWEAVE_MAX_FILE_SIZE_BYTES,
    SITEWEAVE_OCR_IMAGES,
    SITEWEAVE_READ_TIMEOUT_S,
)
from siteweave.error_handler import handle_file_processing_error, log_error
from siteweave.exceptions import (
    FileTooLargeError,
    ReadFailureError,
    UnsupportedFileTypeError,
    WorkerDependencyLoadError,
    WorkerProcessingError,
)
from siteweave.file_io import UploadedFile, read_file, read_text_file
from siteweave.html_parser import parse_html_into_sections
from siteweave.markdown import parse_markdown_into_sections
from siteweave.pptx_parser import parse_pptx_into_sections
from siteweave.schemas import Section
from siteweave.sections import (
    build_data_url,
    create_basic_sections,
    create_docx_placeholder_sections,
    create_image_sections,
    create_pdf_placeholder_sections,
)
from siteweave.text_parser import parse_text_into_sections
from siteweave.validation import IMAGE_EXTENSIONS, SUPPORTED_EXTENSIONS, format_file_size
from siteweave.worker import ProgressHandler, SupportsProcessDocument

logger = logging.getLogger(__name__)


async def process_file(
    file: UploadedFile,
    *,
    workers: SupportsProcessDocument | None = None,
    on_progress: ProgressHandler | None = None,
    ocr_images: bool = SITEWEAVE_OCR_IMAGES,
    max_size: int = SITEWEAVE_MAX_FILE_SIZE_BYTES,
) -> list[Section]:
    """Convert an uploaded file into an ordered list of sections.

    Args:
        file: The upload to convert.
        workers: Worker client or pool used for PDF extraction and image OCR.
            PDFs fall back to a placeholder when it is missing or fails.
        on_progress: Receives worker progress updates.
        ocr_images: Append OCR-derived sections to the image skeleton.
        max_size: Upper size limit in bytes.

    Returns:
        The sections. Any failure after the size check yields the generic
        two-section fallback instead of an exception.

    Raises:
        FileTooLargeError: If the file exceeds ``max_size``.
    """
    try:
        size = file.size
    except ReadFailureError as exc:
        log_error(handle_file_processing_error(exc, file.name))
        return create_basic_sections(file.name)

    if size > max_size:
        raise FileTooLargeError(
            f"File too large. Maximum size is {format_file_size(max_size)}.",
            context={"fileName": file.name, "size": size},
        )

    try:
        return await _route(file, workers, on_progress, ocr_images)
    except Exception as exc:  # noqa: BLE001 - every failure ends in the fallback sections
        log_error(handle_file_processing_error(exc, file.name))
        return create_basic_sections(file.name)


async def _route(
    file: UploadedFile,
    workers: SupportsProcessDocument | None,
    on_progress: ProgressHandler | None,
    ocr_images: bool,
) -> list[Section]:
    extension = file.extension
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(
            f"Unsupported file type: .{extension}", context={"fileName": file.name}
        )

    logger.debug("Processing %s as %s", file.name, extension)
    if extension == "txt":
        text = await read_text_file(file, timeout=SITEWEAVE_READ_TIMEOUT_S)
        return parse_text_into_sections(text, file.name)
    if extension == "md":
        text = await read_text_file(file, timeout=SITEWEAVE_READ_TIMEOUT_S)
        return parse_markdown_into_sections(text, file.name)
    if extension in ("html", "htm"):
        text = await read_text_file(file, timeout=SITEWEAVE_READ_TIMEOUT_S)
        return parse_html_into_sections(text, file.name)
    if extension in IMAGE_EXTENSIONS:
        return await _process_image(file, workers, on_progress, ocr_images)
    if extension == "pdf":
        return await _process_pdf(file, workers, on_progress)
    if extension == "pptx":
        data = await read_file(file, timeout=SITEWEAVE_READ_TIMEOUT_S)
        return parse_pptx_into_sections(data, file.name)
    return create_docx_placeholder_sections(file.name)


async def _process_pdf(
    file: UploadedFile,
    workers: SupportsProcessDocument | None,
    on_progress: ProgressHandler | None,
) -> list[Section]:
    if workers is None:
        logger.info("No document worker available, using PDF placeholder for %s", file.name)
        return create_pdf_placeholder_sections(file.name)

    data = await read_file(file, timeout=SITEWEAVE_READ_TIMEOUT_S)
    try:
        result = await workers.process_document(
            file_type="pdf", file_data=data, file_name=file.name, on_progress=on_progress
        )
    except (WorkerProcessingError, WorkerDependencyLoadError) as exc:
        logger.warning("PDF extraction failed for %s: %s", file.name, exc.message)
        return create_pdf_placeholder_sections(file.name)
    return result.sections


async def _process_image(
    file: UploadedFile,
    workers: SupportsProcessDocument | None,
    on_progress: ProgressHandler | None,
    ocr_images: bool,
) -> list[Section]:
    data = await read_file(file, timeout=SITEWEAVE_READ_TIMEOUT_S)
    sections = create_image_sections(build_data_url(data, file.name), file.name)
    if not ocr_images or workers is None:
        return sections

    try:
        result = await workers.process_document(
            file_type="image", file_data=data, file_name=file.name, on_progress=on_progress
        )
    except (WorkerProcessingError, WorkerDependencyLoadError) as exc:
        logger.warning("Image OCR failed for %s: %s", file.name, exc.message)
        return sections

    recognized = [section for section in result.sections if not section.is_header]
    if not recognized:
        return sections
    # Keep the header and image, replace the description placeholder.
    return sections[:2] + recognized
