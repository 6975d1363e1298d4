"""
IntermediateResult — one row per (job, file, chunk) processor invocation.

Rows are insert-only.  `result_type` keeps the "<filetype>_chunk_<n>"
naming that downstream readers match on; `chunk_index` stores the same
cursor as an integer so progress can be queried without string parsing.

A partial unique index allows at most one COMPLETED row per chunk:
replaying a finished chunk does not create a second set of PODs.
Failed attempts are kept as separate rows.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID

from dispatch.db.models.base import Base, generate_uuid, utcnow


class IntermediateResult(Base):
    """Output of one processor invocation."""

    __tablename__ = "dispatch_intermediate_results"
    __table_args__ = (
        Index(
            "uq_dispatch_intermediate_completed_chunk",
            "job_id",
            "file_id",
            "chunk_index",
            unique=True,
            postgresql_where=text("status = 'completed'"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=generate_uuid)

    # ── Ownership ─────────────────────────────
    job_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), nullable=True)
    file_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    # ── Chunk identity ────────────────────────
    result_type = Column(String(100), nullable=False, index=True)
    chunk_index = Column(Integer, nullable=False, default=0)
    zone_code = Column(String(20), nullable=True)

    # ── Outcome ───────────────────────────────
    status = Column(String(20), nullable=False, index=True)
    data = Column(JSONB, default=dict)
    error_message = Column(Text, nullable=True)
    processing_time_ms = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<IntermediateResult {self.result_type} status={self.status} file={self.file_id}>"
