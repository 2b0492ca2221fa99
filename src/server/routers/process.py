"""Process endpoint for the API."""

from fastapi import APIRouter, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from server.models import ProcessErrorResponse, ProcessSuccessResponse
from siteweave.config import SITEWEAVE_MAX_FILE_SIZE_BYTES
from siteweave.error_handler import handle_file_processing_error, log_error
from siteweave.exceptions import FileTooLargeError
from siteweave.file_io import UploadedFile
from siteweave.processor import process_file
from siteweave.utils.logging_config import get_logger
from siteweave.validation import format_file_size, validate_file

logger = get_logger(__name__)

router = APIRouter()

PROCESS_RESPONSES: dict = {
    status.HTTP_200_OK: {"model": ProcessSuccessResponse, "description": "Document converted"},
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: {
        "model": ProcessErrorResponse,
        "description": "Upload exceeds the size limit",
    },
}


def _too_large(exc: FileTooLargeError, file_name: str) -> JSONResponse:
    app_error = handle_file_processing_error(exc, file_name)
    log_error(app_error)
    body = ProcessErrorResponse(error=app_error.user_message, code=app_error.code)
    return JSONResponse(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, content=body.model_dump())


@router.post("/api/process", responses=PROCESS_RESPONSES)
async def api_process(request: Request, file: UploadFile = File(...)) -> JSONResponse:
    """Convert an uploaded document into website sections.

    **Parameters**

    - **file** (`UploadFile`): The document, as multipart form data

    **Returns**

    - **JSONResponse**: ``sections`` with camelCase fields plus validation ``warnings``,
      or a **413** error when the upload is over the size limit

    """
    name = file.filename or "upload"
    if file.size is not None and file.size > SITEWEAVE_MAX_FILE_SIZE_BYTES:
        exc = FileTooLargeError(
            f"File too large. Maximum size is {format_file_size(SITEWEAVE_MAX_FILE_SIZE_BYTES)}.",
            context={"fileName": name, "size": file.size},
        )
        return _too_large(exc, name)

    data = await file.read()
    validation = validate_file(name, len(data))
    logger.bind(file_name=name, size=len(data), valid=validation.is_valid).info(
        "Processing upload"
    )

    try:
        sections = await process_file(
            UploadedFile(name=name, data=data),
            workers=request.app.state.siteweave.worker_pool,
            max_size=SITEWEAVE_MAX_FILE_SIZE_BYTES,
        )
    except FileTooLargeError as exc:
        return _too_large(exc, name)

    response = ProcessSuccessResponse(sections=sections, warnings=validation.warnings)
    return JSONResponse(content=response.model_dump(by_alias=True, mode="json"))
