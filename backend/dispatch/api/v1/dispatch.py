"""
Dispatch processor endpoints — process one chunk, inspect progress and results.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.api.deps import get_db, get_fetcher, get_store
from dispatch.api.schemas.dispatch import (
    FileProgressResponse,
    IntermediateResultOut,
    JobResultsResponse,
    ProcessErrorResponse,
    ProcessFileRequest,
    ProcessFileResponse,
)
from dispatch.core.config import settings
from dispatch.core.logging import get_logger
from dispatch.pipeline.chunking import Deadline
from dispatch.pipeline.context import ProcessRequest
from dispatch.pipeline.engine import DispatchProcessor
from dispatch.repositories import intermediate_results
from dispatch.repositories.store import DispatchStore
from dispatch.storage.blob_fetcher import BlobFetcher

router = APIRouter(prefix="/dispatch", tags=["Dispatch"])
logger = get_logger(__name__)


# ─── Process ──────────────────────────────────────────────
@router.post(
    "/process",
    response_model=ProcessFileResponse,
    responses={500: {"model": ProcessErrorResponse}},
)
async def process_file(
    body: ProcessFileRequest,
    store: DispatchStore = Depends(get_store),
    fetcher: BlobFetcher = Depends(get_fetcher),
):
    """
    Process one chunk of one dispatch file.

    Always inserts one intermediate result row.  Callers re-invoke with
    `chunkIndex = result.next_chunk_index` while
    `result.more_chunks_needed` is true.
    """
    deadline = Deadline(settings.MAX_PROCESSING_TIME_MS)
    request = ProcessRequest(
        file_id=body.file_id,
        job_id=body.job_id,
        user_id=body.user_id,
        action=body.action,
        chunk_index=body.chunk_index,
        total_chunks=body.total_chunks,
    )

    try:
        outcome = await DispatchProcessor(store=store, fetcher=fetcher).process(request, deadline)
    except Exception as exc:
        logger.exception("Processing error", file_id=body.file_id, job_id=body.job_id)
        error = ProcessErrorResponse(error=str(exc), processing_time_ms=deadline.elapsed_ms)
        return JSONResponse(status_code=500, content=error.model_dump(by_alias=True))

    return outcome.to_response()


# ─── Progress ─────────────────────────────────────────────
@router.get(
    "/jobs/{job_id}/files/{file_id}/progress",
    response_model=FileProgressResponse,
    response_model_by_alias=True,
)
async def get_file_progress(
    job_id: UUID,
    file_id: UUID,
    store: DispatchStore = Depends(get_store),
):
    """Completed chunks and collected PODs of one file within a job."""
    file = await store.get_file(str(file_id))
    if file is None:
        raise HTTPException(status_code=404, detail=f"File not found: {file_id}")

    chunks = await store.completed_chunks(
        job_id=str(job_id), file_id=str(file_id), file_type=file.file_type
    )
    completed = [c.chunk_index for c in chunks]
    pods: dict[str, None] = {}
    for chunk in chunks:
        pods.update(dict.fromkeys(chunk.data.get("pod_codes") or []))

    return FileProgressResponse(
        job_id=str(job_id),
        file_id=str(file_id),
        file_type=file.file_type,
        completed_chunks=completed,
        next_chunk_index=max(completed) + 1 if completed else 0,
        pod_codes=list(pods),
        total_pods=len(pods),
    )


# ─── Job Results ──────────────────────────────────────────
@router.get(
    "/jobs/{job_id}/results",
    response_model=JobResultsResponse,
    response_model_by_alias=True,
)
async def list_job_results(
    job_id: UUID,
    status: str | None = None,
    limit: int = 100,
    offset: int = 0,
    db: AsyncSession = Depends(get_db),
):
    """Intermediate result rows of a job, newest first."""
    rows = await intermediate_results.list_job_results(
        db, job_id, status=status, limit=limit, offset=offset
    )
    data = [
        IntermediateResultOut(
            id=str(r.id),
            file_id=str(r.file_id),
            result_type=r.result_type,
            chunk_index=r.chunk_index,
            zone_code=r.zone_code,
            status=r.status,
            data=r.data,
            error_message=r.error_message,
            processing_time_ms=r.processing_time_ms,
            created_at=r.created_at,
        )
        for r in rows
    ]
    return JobResultsResponse(data=data, total=len(data))
