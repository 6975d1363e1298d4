"""API schema package."""

from dispatch.api.schemas.dispatch import (
    FileProgressResponse,
    IntermediateResultOut,
    JobResultsResponse,
    ProcessErrorResponse,
    ProcessFileRequest,
    ProcessFileResponse,
)

__all__ = [
    "FileProgressResponse",
    "IntermediateResultOut",
    "JobResultsResponse",
    "ProcessErrorResponse",
    "ProcessFileRequest",
    "ProcessFileResponse",
]
