"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.db.session import get_db as _get_db
from dispatch.repositories.store import DispatchStore, SqlDispatchStore
from dispatch.storage.blob_fetcher import BlobFetcher


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


async def get_store(db: AsyncSession = Depends(get_db)) -> DispatchStore:
    """Result store bound to the request's session."""
    return SqlDispatchStore(db)


async def get_fetcher() -> BlobFetcher:
    """Storage client using the configured service-role key."""
    return BlobFetcher()
