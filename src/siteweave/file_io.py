"""Uploaded file handle and timed asynchronous reads."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from siteweave.config import SITEWEAVE_READ_TIMEOUT_S
from siteweave.exceptions import ReadFailureError, ReadTimeoutError


@dataclass
class UploadedFile:
    """A file handed to the dispatcher, backed by a path or by in-memory bytes.

    Attributes:
        name: Original file name including the extension.
        path: Location on disk, when the upload was spooled to a file.
        data: Raw contents, when the upload is held in memory.
    """

    name: str
    path: Path | None = None
    data: bytes | None = None

    @property
    def size(self) -> int:
        """Size in bytes.

        Raises:
            ReadFailureError: If the spooled file cannot be stat'ed.
        """
        if self.data is not None:
            return len(self.data)
        if self.path is None:
            return 0
        try:
            return self.path.stat().st_size
        except OSError as exc:
            raise ReadFailureError(
                f"Failed to read {self.name}: {exc}", context={"fileName": self.name}
            ) from exc

    @property
    def extension(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()

    async def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ReadFailureError(
                f"No content available for {self.name}", context={"fileName": self.name}
            )
        return await read_bytes_async(self.path)


async def read_bytes_async(path: Path) -> bytes:
    """Read a file's bytes in a worker thread.

    Args:
        path: Path to the file to read.

    Returns:
        The file contents.
    """
    return await asyncio.to_thread(path.read_bytes)


async def read_file(
    file: UploadedFile, *, timeout: float = SITEWEAVE_READ_TIMEOUT_S
) -> bytes:
    """Read an uploaded file, giving up after ``timeout`` seconds.

    Raises:
        ReadTimeoutError: If the read does not finish in time.
        ReadFailureError: If the underlying I/O fails.
    """
    context = {"fileName": file.name}
    try:
        return await asyncio.wait_for(file.read_bytes(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise ReadTimeoutError(
            f"File processing timeout after {timeout:g}s", context=context
        ) from exc
    except OSError as exc:
        raise ReadFailureError(f"Failed to read {file.name}: {exc}", context=context) from exc


async def read_text_file(
    file: UploadedFile, *, timeout: float = SITEWEAVE_READ_TIMEOUT_S
) -> str:
    """Read an uploaded file as UTF-8 text, replacing undecodable bytes."""
    data = await read_file(file, timeout=timeout)
    return data.decode("utf-8", errors="replace")
