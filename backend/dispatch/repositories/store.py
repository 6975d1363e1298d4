"""
DispatchStore — the persistence seam used by the processor.

The processor only needs three operations: load a file, read the
completed chunks of that file, and insert one result row.  Two
implementations share that surface:

    - SqlDispatchStore: backed by an AsyncSession and the repository
      functions (production).
    - InMemoryDispatchStore: dict/list backed, for local runs and tests.
"""

from __future__ import annotations

import uuid
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.core.constants import ResultStatus
from dispatch.pipeline.context import ChunkRecord, FileRecord
from dispatch.pipeline.errors import PersistenceError
from dispatch.repositories import dispatch_files, intermediate_results


class DispatchStore(Protocol):
    async def get_file(self, file_id: str) -> FileRecord | None: ...

    async def completed_chunks(
        self, *, job_id: str, file_id: str, file_type: str
    ) -> list[ChunkRecord]: ...

    async def insert_result(
        self,
        *,
        job_id: str,
        user_id: str | None,
        file_id: str,
        file_type: str,
        chunk_index: int,
        zone_code: str | None,
        status: str,
        data: dict[str, Any],
        error_message: str | None,
        processing_time_ms: int,
    ) -> str | None: ...


def _as_uuid(value: str | None) -> uuid.UUID | None:
    return uuid.UUID(str(value)) if value else None


class SqlDispatchStore:
    """DispatchStore over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_file(self, file_id: str) -> FileRecord | None:
        try:
            key = _as_uuid(file_id)
        except ValueError:
            return None
        row = await dispatch_files.get_dispatch_file(self.session, key)
        if row is None:
            return None
        return FileRecord(
            id=str(row.id),
            file_name=row.file_name,
            file_url=row.file_url,
            file_type=row.file_type,
            file_size=row.file_size or 0,
            zone_code=row.zone_code,
            month_reference=row.month_reference,
        )

    async def completed_chunks(
        self, *, job_id: str, file_id: str, file_type: str
    ) -> list[ChunkRecord]:
        rows = await intermediate_results.list_completed_chunks(
            self.session,
            job_id=_as_uuid(job_id),
            file_id=_as_uuid(file_id),
            file_type=file_type,
        )
        return [ChunkRecord(chunk_index=r.chunk_index, data=r.data or {}) for r in rows]

    async def insert_result(self, **fields: Any) -> str | None:
        try:
            row_id = await intermediate_results.insert_result(
                self.session,
                job_id=_as_uuid(fields["job_id"]),
                user_id=_as_uuid(fields.get("user_id")),
                file_id=_as_uuid(fields["file_id"]),
                file_type=fields["file_type"],
                chunk_index=fields["chunk_index"],
                zone_code=fields.get("zone_code"),
                status=fields["status"],
                data=fields["data"],
                error_message=fields.get("error_message"),
                processing_time_ms=fields["processing_time_ms"],
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Could not store intermediate result: {exc}",
                step_name="persist_result",
                details={"file_id": fields["file_id"], "chunk_index": fields["chunk_index"]},
            ) from exc
        return str(row_id) if row_id else None


class InMemoryDispatchStore:
    """DispatchStore kept in process memory, with the same uniqueness rule."""

    def __init__(self, files: list[FileRecord] | None = None) -> None:
        self.files: dict[str, FileRecord] = {f.id: f for f in files or []}
        self.rows: list[dict[str, Any]] = []

    def add_file(self, record: FileRecord) -> None:
        self.files[record.id] = record

    async def get_file(self, file_id: str) -> FileRecord | None:
        return self.files.get(file_id)

    async def completed_chunks(
        self, *, job_id: str, file_id: str, file_type: str
    ) -> list[ChunkRecord]:
        prefix = intermediate_results.chunk_result_pattern(file_type).rstrip("%")
        rows = [
            r for r in self.rows
            if r["job_id"] == job_id
            and r["file_id"] == file_id
            and r["result_type"].startswith(prefix)
            and r["status"] == ResultStatus.COMPLETED
        ]
        rows.sort(key=lambda r: r["chunk_index"])
        return [ChunkRecord(chunk_index=r["chunk_index"], data=r["data"]) for r in rows]

    async def insert_result(self, **fields: Any) -> str | None:
        if fields["status"] == ResultStatus.COMPLETED and any(
            r["job_id"] == fields["job_id"]
            and r["file_id"] == fields["file_id"]
            and r["chunk_index"] == fields["chunk_index"]
            and r["status"] == ResultStatus.COMPLETED
            for r in self.rows
        ):
            return None

        row_id = str(uuid.uuid4())
        self.rows.append({
            **fields,
            "id": row_id,
            "result_type": intermediate_results.chunk_result_type(
                fields["file_type"], fields["chunk_index"]
            ),
        })
        return row_id
