"""Off-loop document processing: PDF text extraction, OCR fallback and parsing.

The worker runs in its own thread and talks to the host only through
message dicts shaped like the models in :mod:`siteweave.schemas.messages`:

* inbound ``processDocument`` requests,
* outbound ``progress`` updates (advisory) followed by exactly one terminal
  ``result``, ``imageResult`` or ``error`` message per request id.

If the PDF/OCR libraries cannot be loaded, the worker posts a single
``error`` message without an id and stops accepting work.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import uuid
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from siteweave.config import SITEWEAVE_OCR_RENDER_SCALE, SITEWEAVE_WORKER_POOL_SIZE
from siteweave.exceptions import WorkerDependencyLoadError, WorkerProcessingError
from siteweave.ocr import OcrEngine, TesseractEngine
from siteweave.pdf_extraction import (
    PdfBackend,
    PdfDocument,
    PyMuPDFBackend,
    join_text_runs,
    needs_ocr,
)
from siteweave.schemas import (
    WORKER_MESSAGE_ADAPTER,
    ErrorMessage,
    ImageResultMessage,
    ProcessDocumentRequest,
    ProgressMessage,
    ResultMessage,
    Section,
)
from siteweave.sections import build_data_url
from siteweave.text_parser import parse_text_into_sections

logger = logging.getLogger(__name__)

PostMessage = Callable[[dict[str, Any]], None]
ProgressHandler = Callable[[ProgressMessage], None]

_STOP = object()


class WorkerState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    DECIDING_OCR = "deciding_ocr"
    OCR = "ocr"
    PARSING = "parsing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class WorkerBackends:
    """PDF and OCR implementations owned by one worker."""

    pdf: PdfBackend
    ocr: OcrEngine


def load_backends() -> WorkerBackends:
    """Import PyMuPDF, pytesseract and Pillow and check the tesseract binary.

    Raises:
        WorkerDependencyLoadError: If any of them is unavailable.
    """
    try:
        import pymupdf
        import pytesseract
        from PIL import Image

        pytesseract.get_tesseract_version()
    except (ImportError, OSError, RuntimeError) as exc:
        raise WorkerDependencyLoadError(str(exc) or exc.__class__.__name__) from exc

    return WorkerBackends(
        pdf=PyMuPDFBackend(pymupdf),
        ocr=TesseractEngine(pytesseract, Image),
    )


class DocumentProcessor:
    """Turn ``processDocument`` requests into outbound messages."""

    def __init__(
        self,
        backends: WorkerBackends,
        post_message: PostMessage,
        *,
        render_scale: float = SITEWEAVE_OCR_RENDER_SCALE,
    ) -> None:
        self._backends = backends
        self._post_message = post_message
        self._render_scale = render_scale
        self.state = WorkerState.IDLE

    def handle_message(self, data: Any) -> None:
        if not isinstance(data, dict) or data.get("type") != "processDocument":
            return

        request_id = data.get("id")
        self.state = WorkerState.IDLE
        try:
            request = ProcessDocumentRequest.model_validate(data)
            reply = self._process(request)
        except Exception as exc:  # noqa: BLE001 - each request is fault-isolated
            self._set_state(WorkerState.FAILED)
            logger.warning("Document request %s failed: %s", request_id, exc)
            reply = ErrorMessage(
                id=None if request_id is None else str(request_id),
                error=str(exc) or exc.__class__.__name__,
            )
        self._post(reply)

    def _process(self, request: ProcessDocumentRequest) -> ResultMessage | ImageResultMessage:
        if request.file_type == "pdf":
            sections = self._process_pdf(request)
            return ResultMessage(id=request.id, sections=sections)
        if request.file_type == "image":
            sections = self._process_image(request)
            return ImageResultMessage(
                id=request.id,
                sections=sections,
                data_url=build_data_url(request.file_data, request.file_name),
            )
        raise WorkerProcessingError(
            f"Unsupported file type for worker: {request.file_type}",
            context={"requestId": request.id},
        )

    def _process_pdf(self, request: ProcessDocumentRequest) -> list[Section]:
        self._set_state(WorkerState.EXTRACTING)
        with closing(self._backends.pdf.open(request.file_data)) as document:
            text = self._extract_text(document)

            self._set_state(WorkerState.DECIDING_OCR)
            if needs_ocr(text):
                self._progress("Fallback OCR", 0.5, "Low quality text detected. Performing OCR...")
                self._set_state(WorkerState.OCR)
                text = self._ocr_pdf(document)

        return self._parse(text, request.file_name)

    def _extract_text(self, document: PdfDocument) -> str:
        page_count = document.page_count
        pages: list[str] = []
        for index in range(page_count):
            number = index + 1
            self._progress(
                f"Extracting page {number}",
                0.1 + index * (0.4 / page_count),
                f"Extracting text from page {number} of {page_count}...",
            )
            pages.append(join_text_runs(document.text_runs(index)) + "\n\n")
        return "".join(pages)

    def _ocr_pdf(self, document: PdfDocument) -> str:
        page_count = document.page_count
        share = 0.5 / page_count if page_count else 0.0
        pages: list[str] = []
        for index in range(page_count):
            number = index + 1
            base = 0.5 + index * share
            image = document.render_page_png(index, self._render_scale)

            def report(fraction: float, base: float = base, number: int = number) -> None:
                self._progress(
                    f"Reading page {number}",
                    base + fraction * share,
                    f"Reading text on page {number}...",
                )

            pages.append(self._backends.ocr.recognize(image, report) + "\n\n")
        return "".join(pages)

    def _process_image(self, request: ProcessDocumentRequest) -> list[Section]:
        self._set_state(WorkerState.OCR)

        def report(fraction: float) -> None:
            self._progress("Reading image", 0.2 + fraction * 0.6, "Reading text from image...")

        text = self._backends.ocr.recognize(request.file_data, report)
        return self._parse(text, request.file_name)

    def _parse(self, text: str, file_name: str) -> list[Section]:
        self._set_state(WorkerState.PARSING)
        sections = parse_text_into_sections(text, file_name)
        self._set_state(WorkerState.DONE)
        return sections

    def _set_state(self, state: WorkerState) -> None:
        logger.debug("Worker state %s -> %s", self.state.value, state.value)
        self.state = state

    def _progress(self, step: str, progress: float, message: str) -> None:
        self._post(
            ProgressMessage(step=step, progress=min(max(progress, 0.0), 1.0), message=message)
        )

    def _post(self, message: Any) -> None:
        self._post_message(message.model_dump(by_alias=True))


class DocumentWorker:
    """A dedicated thread that owns the backends and serves requests one at a time."""

    def __init__(
        self,
        *,
        backends_loader: Callable[[], WorkerBackends] = load_backends,
        name: str = "siteweave-document-worker",
    ) -> None:
        self._backends_loader = backends_loader
        self._inbox: queue.Queue[Any] = queue.Queue()
        self._listeners: list[PostMessage] = []
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def add_listener(self, listener: PostMessage) -> None:
        """Register a callback for outbound messages (called from the worker thread)."""
        self._listeners.append(listener)

    def start(self) -> None:
        if not self._thread.is_alive() and self._thread.ident is None:
            self._thread.start()

    def post_message(self, message: dict[str, Any]) -> None:
        self._inbox.put(message)

    def terminate(self, timeout: float | None = None) -> None:
        """Stop after the current request; queued requests are discarded."""
        while True:
            try:
                self._inbox.get_nowait()
            except queue.Empty:
                break
        self._inbox.put(_STOP)
        if self._thread.ident is not None:
            self._thread.join(timeout)

    def _emit(self, message: dict[str, Any]) -> None:
        for listener in list(self._listeners):
            listener(message)

    def _run(self) -> None:
        try:
            backends = self._backends_loader()
        except WorkerDependencyLoadError as exc:
            logger.error("Document worker unavailable: %s", exc.message)
            self._emit(
                ErrorMessage(error=f"Failed to load worker dependencies: {exc.message}").model_dump(
                    by_alias=True
                )
            )
            return

        processor = DocumentProcessor(backends, self._emit)
        while True:
            message = self._inbox.get()
            if message is _STOP:
                break
            processor.handle_message(message)


@dataclass
class WorkerResult:
    sections: list[Section]
    data_url: str | None = None


class SupportsProcessDocument(Protocol):
    async def process_document(
        self,
        *,
        file_type: str,
        file_data: bytes,
        file_name: str,
        on_progress: ProgressHandler | None = None,
    ) -> WorkerResult: ...


class DocumentWorkerClient:
    """Asyncio front end for a :class:`DocumentWorker`.

    Requests are tracked in a pending map keyed by request id, with a single
    in-flight slot: a second call waits until the first one has finished.
    """

    def __init__(self, worker: DocumentWorker | None = None) -> None:
        self._worker = worker or DocumentWorker()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: dict[str, asyncio.Future[WorkerResult]] = {}
        self._on_progress: ProgressHandler | None = None
        self._load_error: WorkerDependencyLoadError | None = None
        self._slot = asyncio.Lock()
        self._worker.add_listener(self._on_worker_message)
        self._worker.start()

    @property
    def usable(self) -> bool:
        return self._load_error is None

    async def process_document(
        self,
        *,
        file_type: str,
        file_data: bytes,
        file_name: str,
        on_progress: ProgressHandler | None = None,
    ) -> WorkerResult:
        """Send one document to the worker and wait for its terminal message.

        Raises:
            WorkerDependencyLoadError: If the worker could not load its libraries.
            WorkerProcessingError: If the worker answered with an ``error``.
        """
        async with self._slot:
            self._loop = asyncio.get_running_loop()
            if self._load_error is not None:
                raise self._load_error

            request_id = uuid.uuid4().hex
            future: asyncio.Future[WorkerResult] = self._loop.create_future()
            self._pending[request_id] = future
            self._on_progress = on_progress
            try:
                request = ProcessDocumentRequest(
                    id=request_id,
                    file_type=file_type,
                    file_data=file_data,
                    file_name=file_name,
                )
                self._worker.post_message(request.model_dump(by_alias=True))
                return await future
            finally:
                self._pending.pop(request_id, None)
                self._on_progress = None

    def close(self) -> None:
        self._worker.terminate(timeout=0)

    def _on_worker_message(self, message: dict[str, Any]) -> None:
        # Runs on the worker thread.
        if message.get("type") == "error" and message.get("id") is None:
            self._load_error = WorkerDependencyLoadError(message.get("error", ""))
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._dispatch, message)

    def _dispatch(self, message: dict[str, Any]) -> None:
        parsed = WORKER_MESSAGE_ADAPTER.validate_python(message)

        if isinstance(parsed, ProgressMessage):
            if self._on_progress is not None:
                self._on_progress(parsed)
            return

        if isinstance(parsed, ErrorMessage) and parsed.id is None:
            for future in self._pending.values():
                if not future.done():
                    future.set_exception(self._load_error or WorkerDependencyLoadError(parsed.error))
            return

        future = self._pending.get(parsed.id)
        if future is None or future.done():
            logger.debug("Dropping message for unknown request %s", parsed.id)
            return

        if isinstance(parsed, ErrorMessage):
            future.set_exception(
                WorkerProcessingError(parsed.error, context={"requestId": parsed.id})
            )
        elif isinstance(parsed, ImageResultMessage):
            future.set_result(WorkerResult(sections=parsed.sections, data_url=parsed.data_url))
        else:
            future.set_result(WorkerResult(sections=parsed.sections))


class WorkerPool:
    """Several worker clients handed out to concurrent documents."""

    def __init__(
        self,
        size: int = SITEWEAVE_WORKER_POOL_SIZE,
        *,
        client_factory: Callable[[], DocumentWorkerClient] = DocumentWorkerClient,
    ) -> None:
        self._clients = [client_factory() for _ in range(max(1, size))]
        self._idle: asyncio.Queue[DocumentWorkerClient] | None = None

    @property
    def size(self) -> int:
        return len(self._clients)

    async def process_document(
        self,
        *,
        file_type: str,
        file_data: bytes,
        file_name: str,
        on_progress: ProgressHandler | None = None,
    ) -> WorkerResult:
        idle = self._idle_clients()
        client = await idle.get()
        try:
            return await client.process_document(
                file_type=file_type,
                file_data=file_data,
                file_name=file_name,
                on_progress=on_progress,
            )
        finally:
            idle.put_nowait(client)

    def close(self) -> None:
        for client in self._clients:
            client.close()

    def _idle_clients(self) -> asyncio.Queue[DocumentWorkerClient]:
        if self._idle is None:
            self._idle = asyncio.Queue()
            for client in self._clients:
                self._idle.put_nowait(client)
        return self._idle
