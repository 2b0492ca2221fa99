"""Worker message protocol models."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from siteweave.schemas.sections import Section


class _Message(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessDocumentRequest(_Message):
    """Inbound request asking the worker to convert one document.

    ``file_type`` is kept as a plain string so that unknown types reach the
    worker and are answered with an ``error`` message.
    """

    id: str
    type: Literal["processDocument"] = "processDocument"
    file_type: str
    file_data: bytes
    file_name: str


class ProgressMessage(_Message):
    """Advisory progress update; consumers may drop it."""

    type: Literal["progress"] = "progress"
    step: str
    progress: float = Field(..., ge=0.0, le=1.0)
    message: str


class ResultMessage(_Message):
    type: Literal["result"] = "result"
    id: str
    sections: list[Section]


class ImageResultMessage(_Message):
    type: Literal["imageResult"] = "imageResult"
    id: str
    sections: list[Section]
    data_url: str


class ErrorMessage(_Message):
    """Terminal failure for ``id``, or a load-time failure when ``id`` is None."""

    type: Literal["error"] = "error"
    id: str | None = None
    error: str


WorkerMessage = Annotated[
    Union[ProgressMessage, ResultMessage, ImageResultMessage, ErrorMessage],
    Field(discriminator="type"),
]

WORKER_MESSAGE_ADAPTER: TypeAdapter[WorkerMessage] = TypeAdapter(WorkerMessage)
