"""
DispatchProcessor — runs one invocation of the dispatch file processor.

Responsibilities:
    - Load the dispatch file row through the store
    - Resolve the step sequence via FlowResolver
    - Execute each step with timing, logging, and error handling
    - Return a ProcessOutcome shaped like the HTTP response

Soft failures (download errors, unreadable archives, exceptions inside
an extract step) end up in the result payload with `success: false` and
are still persisted.  A missing file row or a storage failure while
persisting raises to the caller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

import structlog

from dispatch.core.constants import PipelineStatus, StepStatus
from dispatch.pipeline.chunking import Deadline
from dispatch.pipeline.context import (
    DispatchContext,
    FileRecord,
    ProcessRequest,
    StepResult,
)
from dispatch.pipeline.errors import DispatchFileNotFoundError, FlowResolutionError
from dispatch.pipeline.flow_resolver import FlowResolver
from dispatch.pipeline.results import LettureResult, new_result
from dispatch.pipeline.step import PipelineStep
from dispatch.pipeline.steps.base import Fetcher, ProcessorConfig, StepDependencies


@dataclass
class ProcessOutcome:
    """Final outcome of one processor invocation."""

    execution_id: str
    status: str                     # PipelineStatus value
    file: FileRecord
    chunk_index: int
    processing_time_ms: int
    result: dict[str, Any]
    persisted_row_id: str | None = None
    duplicate_chunk: bool = False
    step_results: list[dict[str, Any]] = field(default_factory=list)
    context_summary: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.result.get("success"))

    def to_response(self) -> dict[str, Any]:
        """Response body of POST /dispatch/process."""
        return {
            "success": self.success,
            "fileId": self.file.id,
            "fileName": self.file.file_name,
            "fileType": self.file.file_type,
            "chunkIndex": self.chunk_index,
            "processingTimeMs": self.processing_time_ms,
            "result": self.result,
        }


class DispatchProcessor:
    """
    Processes one chunk of one dispatch file.

    Usage::

        processor = DispatchProcessor(store=SqlDispatchStore(db), fetcher=BlobFetcher())
        outcome = await processor.process(
            ProcessRequest(file_id="...", job_id="...", chunk_index=0)
        )
        if outcome.result.get("more_chunks_needed"):
            ...  # schedule chunk outcome.result["next_chunk_index"]
    """

    def __init__(
        self,
        store,
        fetcher: Fetcher,
        config: ProcessorConfig | None = None,
        flow_resolver: FlowResolver | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.deps = StepDependencies(
            store=store,
            fetcher=fetcher,
            config=config or ProcessorConfig.from_settings(),
        )
        self.flow_resolver = flow_resolver or FlowResolver()
        self.clock = clock
        self.logger = structlog.get_logger("pipeline.engine")

    async def process(
        self,
        request: ProcessRequest,
        deadline: Deadline | None = None,
    ) -> ProcessOutcome:
        """
        Run every step of the file's flow for one chunk.

        Args:
            request: The invocation parameters.
            deadline: Budget started when the request was received.
                      A fresh one is created when omitted.

        Raises:
            DispatchFileNotFoundError: If no file row matches request.file_id.
        """
        deadline = deadline or Deadline(self.deps.config.max_processing_time_ms, self.clock)

        file = await self.deps.store.get_file(request.file_id)
        if file is None:
            raise DispatchFileNotFoundError(f"File not found: {request.file_id}")

        result = new_result(file.file_type)
        if isinstance(result, LettureResult):
            result.chunk_index = request.chunk_index

        ctx = DispatchContext(request=request, file=file, deadline=deadline, result=result)

        log = self.logger.bind(
            execution_id=ctx.execution_id,
            file_id=file.id,
            job_id=request.job_id,
            file_type=file.file_type,
            chunk_index=request.chunk_index,
        )
        log.info(
            "Processing started",
            file_name=file.file_name,
            size_mb=round(file.file_size_mb, 2),
            total_chunks=request.total_chunks,
        )

        try:
            steps = self.flow_resolver.resolve(file.file_type, self.deps)
        except FlowResolutionError as exc:
            log.error("Flow resolution failed", error=str(exc))
            ctx.result.fail(str(exc))
            steps = self.flow_resolver.failure_flow(self.deps)

        status = await self.run_steps(ctx, steps)

        outcome = ProcessOutcome(
            execution_id=ctx.execution_id,
            status=status,
            file=file,
            chunk_index=request.chunk_index,
            processing_time_ms=deadline.elapsed_ms,
            result=ctx.result.to_dict(),
            persisted_row_id=ctx.persisted_row_id,
            duplicate_chunk=ctx.duplicate_chunk,
            step_results=[sr.to_dict() for sr in ctx.step_results],
            context_summary=ctx.to_summary_dict(),
        )

        log.info(
            "Processing finished",
            status=status,
            success=outcome.success,
            duration_ms=outcome.processing_time_ms,
            warnings=len(ctx.result.warnings),
        )
        return outcome

    async def run_steps(self, ctx: DispatchContext, steps: list[PipelineStep]) -> str:
        """
        Execute an ordered list of steps against a context.

        Can be called directly (bypassing flow resolution) for testing
        or when you have a pre-built step list.
        """
        log = self.logger.bind(execution_id=ctx.execution_id, total_steps=len(steps))

        for index, step in enumerate(steps):
            step_number = index + 1
            step_log = log.bind(
                step_name=step.name,
                step_index=step_number,
                step_description=step.description,
            )

            if await step.should_skip(ctx):
                step_log.info("Step skipped")
                now = datetime.now(timezone.utc)
                ctx.step_results.append(StepResult(
                    step_name=step.name,
                    status=StepStatus.SKIPPED,
                    started_at=now,
                    completed_at=now,
                ))
                continue

            step_log.info(f"Step {step_number}/{len(steps)}: {step.description}")

            result = await self._execute(step, ctx, step_log)
            ctx.step_results.append(result)

            if result.status == StepStatus.COMPLETED:
                step_log.info(
                    "Step completed",
                    duration_ms=result.duration_ms,
                    metadata=result.metadata,
                )
            else:
                step_log.warning(
                    "Step failed",
                    error=result.error,
                    duration_ms=result.duration_ms,
                )

        return PipelineStatus.COMPLETED if ctx.result.success else PipelineStatus.FAILED

    async def _execute(
        self,
        step: PipelineStep,
        ctx: DispatchContext,
        log: structlog.BoundLogger,
    ) -> StepResult:
        """Execute a step, folding unexpected errors into the result payload."""
        started_at = datetime.now(timezone.utc)
        try:
            return await step.execute(ctx)
        except Exception as exc:
            if step.propagate_errors:
                raise
            log.exception("Unexpected error in step", error=str(exc))
            ctx.result.fail(str(exc) or type(exc).__name__)
            ctx.add_error(f"Step '{step.name}' failed: {exc}")
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                error=f"Unexpected: {exc}",
            )
