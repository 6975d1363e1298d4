"""
LoadContinuationStep — recovers progress from earlier chunk invocations.

Reads the completed chunk rows of the same (job, file) and unions their
PODs.  The snapshot is informational: each chunk still deduplicates
only its own PODs, and merging across chunks belongs to the consumer of
the intermediate results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dispatch.core.logging import get_logger
from dispatch.pipeline.context import ContinuationSnapshot, DispatchContext, StepResult
from dispatch.pipeline.results import LettureResult
from dispatch.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from dispatch.repositories.store import DispatchStore

logger = get_logger(__name__)


class LoadContinuationStep(PipelineStep):
    """Collect completed chunks and previously found PODs."""

    name = "load_continuation"
    description = "Load progress of earlier chunks for this file"

    def __init__(self, store: "DispatchStore") -> None:
        self.store = store

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()

        chunks = await self.store.completed_chunks(
            job_id=ctx.request.job_id,
            file_id=ctx.file.id,
            file_type=ctx.file.file_type,
        )

        snapshot = ContinuationSnapshot()
        for chunk in chunks:
            snapshot.completed_chunks.append(chunk.chunk_index)
            snapshot.previous_pods.update(chunk.data.get("pod_codes") or [])
        ctx.continuation = snapshot

        if isinstance(ctx.result, LettureResult):
            ctx.result.previous_pods_count = len(snapshot.previous_pods)

        if ctx.chunk_index in snapshot.completed_chunks:
            logger.warning(
                "Chunk already completed, reprocessing",
                chunk_index=ctx.chunk_index,
                file_id=ctx.file.id,
            )

        logger.info(
            "Continuation loaded",
            completed_chunks=len(snapshot.completed_chunks),
            previous_pods=len(snapshot.previous_pods),
            next_unprocessed_chunk=snapshot.next_unprocessed_chunk,
        )

        return self._success(started_at, metadata={
            "completed_chunks": snapshot.completed_chunks,
            "previous_pods": len(snapshot.previous_pods),
            "next_unprocessed_chunk": snapshot.next_unprocessed_chunk,
        })
