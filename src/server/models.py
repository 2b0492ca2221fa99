"""Pydantic models for the process endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from siteweave.schemas import Section


class ProcessSuccessResponse(BaseModel):
    """Success response model for the /api/process endpoint.

    Attributes
    ----------
    sections : list[Section]
        Ordered website sections, header first.
    warnings : list[str]
        Advisory messages from upload validation.

    """

    model_config = ConfigDict(populate_by_name=True)

    sections: list[Section] = Field(..., description="Ordered website sections")
    warnings: list[str] = Field(default_factory=list, description="Upload validation warnings")


class ProcessErrorResponse(BaseModel):
    """Error response model for the /api/process endpoint.

    Attributes
    ----------
    error : str
        User-facing message describing what went wrong.
    code : str
        Machine-readable error code.

    """

    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")


class HealthResponse(BaseModel):
    status: str = "ok"
    workers: int = 0
