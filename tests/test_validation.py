"""Tests for upload validation helpers."""

from __future__ import annotations

from siteweave.validation import format_file_size, get_file_type_info, validate_file

MB = 1024 * 1024


class TestValidateFile:
    """Tests for validate_file."""

    def test_valid_file(self) -> None:
        result = validate_file("doc.pdf", 1000, max_size=50 * MB)

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_too_large(self) -> None:
        result = validate_file("big.pdf", 60 * MB, max_size=50 * MB)

        assert result.is_valid is False
        assert result.errors == ["File too large. Maximum size is 50 MB."]
        assert result.warnings == ["Large file detected. Processing may take longer."]

    def test_unsupported_extension(self) -> None:
        result = validate_file("tool.exe", 10, max_size=50 * MB)

        assert result.is_valid is False
        assert result.errors[0].startswith("Unsupported file type: .exe.")

    def test_name_too_long(self) -> None:
        result = validate_file("a" * 256 + ".txt", 10, max_size=50 * MB)
        assert "File name too long" in result.errors

    def test_docx_warning(self) -> None:
        result = validate_file("letter.DOCX", 10, max_size=50 * MB)

        assert result.is_valid is True
        assert result.warnings == [
            "DOCX support is limited. Consider converting to PDF for better results."
        ]


class TestFileInfo:
    """Tests for get_file_type_info and format_file_size."""

    def test_file_type_info(self) -> None:
        assert get_file_type_info("deck.PPTX").name == "PowerPoint"
        assert get_file_type_info("noextension").name == "Unknown"

    def test_format_file_size(self) -> None:
        assert format_file_size(0) == "0 Bytes"
        assert format_file_size(1023) == "1023 Bytes"
        assert format_file_size(1536) == "1.5 KB"
        assert format_file_size(50 * MB) == "50 MB"
