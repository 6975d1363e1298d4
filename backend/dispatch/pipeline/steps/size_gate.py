"""
SizeGateStep — refuses to download files above the memory budget.

Whole archives are materialised in memory, so a single oversized input
could exhaust the worker.  Above the limit no download is attempted:
PODs are recovered from the filename where possible and the result is
marked `skipped_due_to_size` with a user-facing warning.
"""

from __future__ import annotations

from dispatch.core.constants import SIZE_GATE_WARNING
from dispatch.core.logging import get_logger
from dispatch.parsing.letture import extract_pods_from_filename
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.results import IpDetailResult, LettureResult
from dispatch.pipeline.step import PipelineStep
from dispatch.pipeline.steps.base import ProcessorConfig

logger = get_logger(__name__)


class SizeGateStep(PipelineStep):
    """Skip the download of files larger than the configured limit."""

    name = "size_gate"
    description = "Check declared file size against the download limit"

    def __init__(self, config: ProcessorConfig) -> None:
        self.max_file_mb = config.max_file_mb

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()
        size_mb = ctx.file.file_size_mb

        if size_mb <= self.max_file_mb:
            return self._success(started_at, metadata={"size_mb": round(size_mb, 2), "gated": False})

        result = ctx.result
        result.skipped_due_to_size = True
        result.warnings.append(
            SIZE_GATE_WARNING.format(size_mb=size_mb, limit_mb=self.max_file_mb)
        )

        pods = extract_pods_from_filename(ctx.file.file_name)
        if isinstance(result, LettureResult):
            result.set_pods(pods)
            result.chunk_index = ctx.chunk_index
            result.files_skipped = 1
        elif isinstance(result, IpDetailResult):
            result.set_pods(pods)

        logger.warning(
            "File above size limit, download skipped",
            file_name=ctx.file.file_name,
            size_mb=round(size_mb, 2),
            limit_mb=self.max_file_mb,
            pods_from_filename=len(pods),
        )
        return self._success(started_at, metadata={
            "size_mb": round(size_mb, 2),
            "gated": True,
            "pods_from_filename": len(pods),
        })
