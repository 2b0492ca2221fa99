"""Tests for the file processor dispatcher."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from siteweave.exceptions import FileTooLargeError, WorkerProcessingError
from siteweave.file_io import UploadedFile
from siteweave.processor import process_file
from siteweave.schemas import Section, TextBlock
from siteweave.sections import header_section
from siteweave.worker import WorkerResult


def _fake_workers(result: WorkerResult | None = None, error: Exception | None = None) -> MagicMock:
    workers = MagicMock()
    workers.process_document = AsyncMock(return_value=result, side_effect=error)
    return workers


def _is_fallback(sections: list[Section], title: str) -> bool:
    return (
        len(sections) == 2
        and sections[0].content[0].value == f"<h1>{title}</h1>"
        and "couldn't extract text" in sections[1].content[0].value
    )


class TestSizeAndTypeChecks:
    """Tests for the checks done before routing."""

    @pytest.mark.asyncio
    async def test_oversized_file_raises(self) -> None:
        upload = UploadedFile(name="big.txt", data=b"x" * 11)

        with pytest.raises(FileTooLargeError):
            await process_file(upload, max_size=10)

    @pytest.mark.asyncio
    async def test_unsupported_type_returns_fallback(self) -> None:
        with patch("siteweave.processor.log_error") as mock_log:
            sections = await process_file(UploadedFile(name="setup.exe", data=b"MZ"))

        assert _is_fallback(sections, "setup")
        mock_log.assert_called_once()
        assert mock_log.call_args.args[0].code == "UNSUPPORTED_FILE_TYPE"


class TestTextRouting:
    """Tests for text, Markdown and HTML uploads."""

    @pytest.mark.asyncio
    async def test_txt(self) -> None:
        upload = UploadedFile(name="notes.txt", data=b"Introduction\nHello world")
        sections = await process_file(upload)
        assert [section.name for section in sections] == ["Header", "Introduction"]

    @pytest.mark.asyncio
    async def test_txt_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("Conclusion\nDone.", encoding="utf-8")

        sections = await process_file(UploadedFile(name="notes.txt", path=path))
        assert [section.name for section in sections] == ["Header", "Conclusion"]

    @pytest.mark.asyncio
    async def test_markdown(self) -> None:
        sections = await process_file(UploadedFile(name="README.md", data=b"# Hello\nworld"))
        assert sections[0].content[0].value == "<h1>Hello</h1>"

    @pytest.mark.asyncio
    async def test_html_uppercase_extension(self) -> None:
        upload = UploadedFile(name="PAGE.HTM", data=b"<body><main><p>Hi</p></main></body>")
        sections = await process_file(upload)
        assert [section.name for section in sections] == ["Header", "Main"]

    @pytest.mark.asyncio
    async def test_parser_failure_returns_fallback(self) -> None:
        upload = UploadedFile(name="notes.txt", data=b"text")
        with patch(
            "siteweave.processor.parse_text_into_sections", side_effect=RuntimeError("boom")
        ):
            sections = await process_file(upload)

        assert _is_fallback(sections, "notes")

    @pytest.mark.asyncio
    async def test_read_timeout_returns_fallback(self) -> None:
        async def slow_read(self: UploadedFile) -> bytes:
            await asyncio.sleep(1)
            return b""

        upload = UploadedFile(name="slow.txt", data=b"never read")
        with (
            patch.object(UploadedFile, "read_bytes", slow_read),
            patch("siteweave.processor.SITEWEAVE_READ_TIMEOUT_S", 0.01),
            patch("siteweave.processor.log_error") as mock_log,
        ):
            sections = await process_file(upload)

        assert _is_fallback(sections, "slow")
        assert mock_log.call_args.args[0].code == "READ_TIMEOUT"

    @pytest.mark.asyncio
    async def test_missing_path_returns_fallback(self) -> None:
        upload = UploadedFile(name="gone.txt", data=None, path=None)
        sections = await process_file(upload)
        assert _is_fallback(sections, "gone")

    @pytest.mark.asyncio
    async def test_deleted_spool_file_returns_fallback(self, tmp_path: Path) -> None:
        upload = UploadedFile(name="gone.txt", path=tmp_path / "missing.txt")
        with patch("siteweave.processor.log_error") as mock_log:
            sections = await process_file(upload)

        assert _is_fallback(sections, "gone")
        error = mock_log.call_args.args[0]
        assert error.code == "FILE_PROCESSING_ERROR"
        assert error.context["kind"] == "read_failure"


class TestPdfRouting:
    """Tests for PDF uploads."""

    @pytest.mark.asyncio
    async def test_placeholder_without_workers(self) -> None:
        sections = await process_file(UploadedFile(name="paper.pdf", data=b"%PDF"))
        assert "PDF processing is being implemented" in sections[1].content[0].value

    @pytest.mark.asyncio
    async def test_worker_sections_are_returned(self) -> None:
        expected = [header_section("paper"), Section(id="s", icon="📄", name="Body")]
        workers = _fake_workers(WorkerResult(sections=expected))

        sections = await process_file(UploadedFile(name="paper.pdf", data=b"%PDF"), workers=workers)

        assert sections == expected
        workers.process_document.assert_awaited_once()
        kwargs = workers.process_document.call_args.kwargs
        assert kwargs["file_type"] == "pdf"
        assert kwargs["file_data"] == b"%PDF"
        assert kwargs["file_name"] == "paper.pdf"

    @pytest.mark.asyncio
    async def test_worker_failure_uses_placeholder(self) -> None:
        workers = _fake_workers(error=WorkerProcessingError("bad pdf"))
        sections = await process_file(UploadedFile(name="paper.pdf", data=b"%PDF"), workers=workers)
        assert "PDF processing is being implemented" in sections[1].content[0].value


class TestOtherRouting:
    """Tests for images, PowerPoint and Word uploads."""

    @pytest.mark.asyncio
    async def test_image_skeleton(self) -> None:
        sections = await process_file(UploadedFile(name="photo.png", data=b"\x89PNG"))

        assert [section.id for section in sections] == ["header", "image-section", "description"]
        assert sections[1].content[0].url.startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_image_ocr_sections_replace_description(self) -> None:
        recognized = Section(
            id="content-1", icon="📄", name="Content", content=[TextBlock(value="<p>Hi</p>")]
        )
        workers = _fake_workers(WorkerResult(sections=[header_section("photo"), recognized]))

        sections = await process_file(
            UploadedFile(name="photo.png", data=b"\x89PNG"), workers=workers, ocr_images=True
        )

        assert [section.id for section in sections] == ["header", "image-section", "content-1"]

    @pytest.mark.asyncio
    async def test_image_ocr_failure_keeps_skeleton(self) -> None:
        workers = _fake_workers(error=WorkerProcessingError("ocr failed"))
        sections = await process_file(
            UploadedFile(name="photo.png", data=b"\x89PNG"), workers=workers, ocr_images=True
        )
        assert [section.id for section in sections] == ["header", "image-section", "description"]

    @pytest.mark.asyncio
    async def test_image_ocr_disabled_skips_worker(self) -> None:
        workers = _fake_workers(WorkerResult(sections=[]))
        await process_file(
            UploadedFile(name="photo.png", data=b"\x89PNG"), workers=workers, ocr_images=False
        )
        workers.process_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pptx(self, make_pptx: Callable[..., bytes]) -> None:
        data = make_pptx({1: ["Deck Title"], 2: ["Overview", "Body text here."]})
        sections = await process_file(UploadedFile(name="deck.pptx", data=data))

        assert sections[0].content[0].value == "<h1>Deck Title</h1>"
        assert [section.id for section in sections] == ["header", "slide-2"]

    @pytest.mark.asyncio
    async def test_corrupt_pptx_returns_fallback(self) -> None:
        sections = await process_file(UploadedFile(name="deck.pptx", data=b"not a zip"))
        assert _is_fallback(sections, "deck")

    @pytest.mark.asyncio
    async def test_docx_placeholder(self) -> None:
        sections = await process_file(UploadedFile(name="letter.docx", data=b"PK"))
        assert sections[1].name == "Document Content"
