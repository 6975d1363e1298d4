"""
DispatchFile — one uploaded source file for a dispatch calculation.

Rows are created by the upload flow and are read-only for the
processor: every invocation looks the file up by id and never
modifies it.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID

from dispatch.db.models.base import Base, generate_uuid, utcnow


class DispatchFile(Base):
    """One uploaded LETTURE / ANAGRAFICA / AGGR_IP / IP_DETAIL file."""

    __tablename__ = "dispatch_files"

    id = Column(UUID(as_uuid=True), primary_key=True, default=generate_uuid)
    user_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    # ── File identity ─────────────────────────
    file_name = Column(String(500), nullable=False)
    file_url = Column(Text, nullable=False)
    file_size = Column(BigInteger, nullable=True)
    file_type = Column(String(50), nullable=False, index=True)

    # ── Dispatch scope ────────────────────────
    zone_code = Column(String(20), nullable=True)
    month_reference = Column(String(7), nullable=True)   # YYYY-MM

    # ── Upload info ───────────────────────────
    upload_source = Column(String(50), nullable=True)
    status = Column(String(50), nullable=False, default="uploaded")
    metadata_ = Column("metadata", JSONB, default=dict)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def file_size_mb(self) -> float:
        return (self.file_size or 0) / (1024 * 1024)

    def __repr__(self) -> str:
        return f"<DispatchFile {self.file_name} type={self.file_type} size={self.file_size}>"
