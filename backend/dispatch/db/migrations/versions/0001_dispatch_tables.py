"""dispatch files and intermediate results

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "dispatch_files",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("file_name", sa.String(500), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("file_type", sa.String(50), nullable=False),
        sa.Column("zone_code", sa.String(20), nullable=True),
        sa.Column("month_reference", sa.String(7), nullable=True),
        sa.Column("upload_source", sa.String(50), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="uploaded"),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_dispatch_files_user_id", "dispatch_files", ["user_id"])
    op.create_index("ix_dispatch_files_file_type", "dispatch_files", ["file_type"])

    op.create_table(
        "dispatch_intermediate_results",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("job_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("file_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("result_type", sa.String(100), nullable=False),
        sa.Column("chunk_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("zone_code", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("data", postgresql.JSONB(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("processing_time_ms", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_dispatch_intermediate_results_job_id", "dispatch_intermediate_results", ["job_id"])
    op.create_index("ix_dispatch_intermediate_results_file_id", "dispatch_intermediate_results", ["file_id"])
    op.create_index("ix_dispatch_intermediate_results_result_type", "dispatch_intermediate_results", ["result_type"])
    op.create_index("ix_dispatch_intermediate_results_status", "dispatch_intermediate_results", ["status"])
    op.create_index(
        "uq_dispatch_intermediate_completed_chunk",
        "dispatch_intermediate_results",
        ["job_id", "file_id", "chunk_index"],
        unique=True,
        postgresql_where=sa.text("status = 'completed'"),
    )


def downgrade() -> None:
    op.drop_table("dispatch_intermediate_results")
    op.drop_table("dispatch_files")
