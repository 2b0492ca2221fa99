"""Pre-upload checks on file name and size."""

from __future__ import annotations

from pydantic import BaseModel, Field

from siteweave.config import (
    LARGE_FILE_WARNING_BYTES,
    MAX_FILE_NAME_LENGTH,
    SITEWEAVE_MAX_FILE_SIZE_BYTES,
)

SUPPORTED_EXTENSIONS = frozenset(
    {
        "pdf",
        "pptx",
        "docx",
        "txt",
        "md",
        "html",
        "htm",
        "png",
        "jpg",
        "jpeg",
        "gif",
        "webp",
        "svg",
        "tiff",
    }
)
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg", "tiff"})


class FileValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class FileTypeInfo(BaseModel):
    name: str
    icon: str
    description: str


_FILE_TYPES = {
    "pdf": FileTypeInfo(name="PDF Document", icon="📄", description="Portable Document Format"),
    "pptx": FileTypeInfo(name="PowerPoint", icon="📊", description="Microsoft PowerPoint Presentation"),
    "docx": FileTypeInfo(name="Word Document", icon="📝", description="Microsoft Word Document"),
    "txt": FileTypeInfo(name="Text File", icon="📄", description="Plain Text Document"),
    "md": FileTypeInfo(name="Markdown", icon="📝", description="Markdown Document"),
    "html": FileTypeInfo(name="HTML File", icon="🌐", description="HyperText Markup Language"),
    "htm": FileTypeInfo(name="HTML File", icon="🌐", description="HyperText Markup Language"),
    "png": FileTypeInfo(name="PNG Image", icon="🖼️", description="Portable Network Graphics"),
    "jpg": FileTypeInfo(name="JPEG Image", icon="🖼️", description="Joint Photographic Experts Group"),
    "jpeg": FileTypeInfo(name="JPEG Image", icon="🖼️", description="Joint Photographic Experts Group"),
    "gif": FileTypeInfo(name="GIF Image", icon="🖼️", description="Graphics Interchange Format"),
    "webp": FileTypeInfo(name="WebP Image", icon="🖼️", description="Web Picture Format"),
    "svg": FileTypeInfo(name="SVG Image", icon="🖼️", description="Scalable Vector Graphics"),
    "tiff": FileTypeInfo(name="TIFF Image", icon="🖼️", description="Tagged Image File Format"),
}
_UNKNOWN_TYPE = FileTypeInfo(name="Unknown", icon="❓", description="Unknown file type")

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def file_extension(file_name: str) -> str:
    """Lowercased text after the last dot, or an empty string."""
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def validate_file(
    file_name: str, size: int, *, max_size: int = SITEWEAVE_MAX_FILE_SIZE_BYTES
) -> FileValidationResult:
    """Check an upload before it is processed.

    Args:
        file_name: Original name of the upload.
        size: Size in bytes.
        max_size: Upper size limit in bytes.

    Returns:
        The result with blocking ``errors`` and advisory ``warnings``.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if size > max_size:
        errors.append(f"File too large. Maximum size is {format_file_size(max_size)}.")

    extension = file_extension(file_name)
    if extension not in SUPPORTED_EXTENSIONS:
        errors.append(
            f"Unsupported file type: .{extension}. "
            "Please use PDF, PowerPoint, Text, HTML, or Image files."
        )

    if len(file_name) > MAX_FILE_NAME_LENGTH:
        errors.append("File name too long")

    if size > LARGE_FILE_WARNING_BYTES:
        warnings.append("Large file detected. Processing may take longer.")
    if extension == "docx":
        warnings.append("DOCX support is limited. Consider converting to PDF for better results.")

    return FileValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def get_file_type_info(file_name: str) -> FileTypeInfo:
    return _FILE_TYPES.get(file_extension(file_name), _UNKNOWN_TYPE)


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``1.5 MB``."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[index]}"
