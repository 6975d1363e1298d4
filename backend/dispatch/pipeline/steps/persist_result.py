"""
PersistResultStep — writes the intermediate result row for this invocation.

Runs for every outcome, including size-gated and failed ones.  Rows are
insert-only; a second completed row for the same (job, file, chunk) is
ignored by the store, which keeps retried chunks idempotent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dispatch.core.constants import ResultStatus
from dispatch.core.logging import get_logger
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from dispatch.repositories.store import DispatchStore

logger = get_logger(__name__)


class PersistResultStep(PipelineStep):
    """Insert one IntermediateResult row."""

    name = "persist_result"
    description = "Store intermediate result row"
    # Storage failures abort the invocation instead of being folded into the result.
    propagate_errors = True

    def __init__(self, store: "DispatchStore") -> None:
        self.store = store

    async def should_skip(self, ctx: DispatchContext) -> bool:
        return False

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()
        result = ctx.result
        status = ResultStatus.COMPLETED if result.success else ResultStatus.FAILED

        row_id = await self.store.insert_result(
            job_id=ctx.request.job_id,
            user_id=ctx.request.user_id,
            file_id=ctx.file.id,
            file_type=ctx.file.file_type,
            chunk_index=ctx.chunk_index,
            zone_code=ctx.file.zone_code,
            status=status.value,
            data=result.to_dict(),
            error_message=result.error,
            processing_time_ms=ctx.deadline.elapsed_ms,
        )

        if row_id is None:
            ctx.duplicate_chunk = True
            logger.warning(
                "Completed row already present, insert ignored",
                job_id=ctx.request.job_id,
                file_id=ctx.file.id,
                chunk_index=ctx.chunk_index,
            )
        else:
            ctx.persisted_row_id = row_id

        return self._success(started_at, metadata={
            "row_id": row_id,
            "status": status.value,
            "duplicate": ctx.duplicate_chunk,
        })
