"""
Data access for dispatch_intermediate_results.

Rows are insert-only.  Completed rows are unique per
(job_id, file_id, chunk_index); inserting a duplicate completed row is
a no-op and reported back to the caller.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.core.constants import ResultStatus
from dispatch.db.models.intermediate_result import IntermediateResult


def chunk_result_type(file_type: str, chunk_index: int) -> str:
    """Build the "<filetype>_chunk_<n>" result type string."""
    return f"{file_type.lower()}_chunk_{chunk_index}"


def chunk_result_pattern(file_type: str) -> str:
    """SQL LIKE pattern matching every chunk row of a file type."""
    return f"{file_type.lower()}_chunk_%"


async def list_completed_chunks(
    db: AsyncSession,
    *,
    job_id: uuid.UUID,
    file_id: uuid.UUID,
    file_type: str,
) -> list[IntermediateResult]:
    """All completed chunk rows for one file within a job, oldest chunk first."""
    stmt = (
        select(IntermediateResult)
        .where(
            IntermediateResult.job_id == job_id,
            IntermediateResult.file_id == file_id,
            IntermediateResult.result_type.like(chunk_result_pattern(file_type)),
            IntermediateResult.status == ResultStatus.COMPLETED.value,
        )
        .order_by(IntermediateResult.chunk_index)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def insert_result(
    db: AsyncSession,
    *,
    job_id: uuid.UUID,
    user_id: uuid.UUID | None,
    file_id: uuid.UUID,
    file_type: str,
    chunk_index: int,
    zone_code: str | None,
    status: str,
    data: dict[str, Any],
    error_message: str | None,
    processing_time_ms: int,
) -> uuid.UUID | None:
    """
    Insert one result row.

    Returns the new row id, or None when a completed row for the same
    chunk already exists.
    """
    stmt = (
        pg_insert(IntermediateResult)
        .values(
            id=uuid.uuid4(),
            job_id=job_id,
            user_id=user_id,
            file_id=file_id,
            result_type=chunk_result_type(file_type, chunk_index),
            chunk_index=chunk_index,
            zone_code=zone_code,
            status=status,
            data=data,
            error_message=error_message,
            processing_time_ms=processing_time_ms,
        )
        .on_conflict_do_nothing(
            index_elements=["job_id", "file_id", "chunk_index"],
            index_where=IntermediateResult.status == ResultStatus.COMPLETED.value,
        )
        .returning(IntermediateResult.id)
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.scalar_one_or_none()


async def list_job_results(
    db: AsyncSession,
    job_id: uuid.UUID,
    *,
    status: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[IntermediateResult]:
    """List result rows for a job, newest first."""
    stmt = select(IntermediateResult).where(IntermediateResult.job_id == job_id)
    if status is not None:
        stmt = stmt.where(IntermediateResult.status == status)
    stmt = stmt.order_by(desc(IntermediateResult.created_at)).limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all())
