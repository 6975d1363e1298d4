"""Dispatch processor request/response schemas.

Wire names are camelCase; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessFileRequest(CamelModel):
    """Body of POST /dispatch/process."""

    file_id: str = Field(..., min_length=1)
    job_id: str = Field(..., min_length=1)
    user_id: str | None = None
    action: str | None = None
    chunk_index: int = Field(0, ge=0)
    total_chunks: int | None = Field(None, ge=1)


class ProcessFileResponse(CamelModel):
    success: bool
    file_id: str
    file_name: str
    file_type: str
    chunk_index: int
    processing_time_ms: int
    result: dict[str, Any]


class ProcessErrorResponse(CamelModel):
    error: str
    processing_time_ms: int


class FileProgressResponse(CamelModel):
    """Read-only view of the progress of a chunked file."""

    job_id: str
    file_id: str
    file_type: str
    completed_chunks: list[int]
    next_chunk_index: int
    pod_codes: list[str]
    total_pods: int


class IntermediateResultOut(CamelModel):
    id: str
    file_id: str
    result_type: str
    chunk_index: int
    zone_code: str | None
    status: str
    data: dict[str, Any] | None
    error_message: str | None
    processing_time_ms: int | None
    created_at: datetime | None


class JobResultsResponse(CamelModel):
    data: list[IntermediateResultOut]
    total: int
