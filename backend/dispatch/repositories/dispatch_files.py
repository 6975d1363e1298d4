"""Data access for the dispatch_files table (read-only from the processor)."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.db.models.dispatch_file import DispatchFile


async def get_dispatch_file(db: AsyncSession, file_id: uuid.UUID) -> DispatchFile | None:
    """Fetch a dispatch file by primary key."""
    return await db.get(DispatchFile, file_id)


async def list_user_files(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    file_type: str | None = None,
    status: str | None = "uploaded",
) -> list[DispatchFile]:
    """List a user's files, optionally filtered by type and status."""
    stmt = select(DispatchFile).where(DispatchFile.user_id == user_id)
    if file_type is not None:
        stmt = stmt.where(DispatchFile.file_type == file_type.upper())
    if status is not None:
        stmt = stmt.where(DispatchFile.status == status)
    stmt = stmt.order_by(DispatchFile.created_at)
    result = await db.execute(stmt)
    return list(result.scalars().all())
