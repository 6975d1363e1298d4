"""
PipelineStep — one stage of a dispatch file invocation.

Steps read and mutate the shared DispatchContext.  Timing, logging and
error folding are the engine's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from dispatch.core.constants import StepStatus
from dispatch.pipeline.context import DispatchContext, StepResult


class PipelineStep(ABC):
    """
    Base class for size gate, download, extraction and persistence steps.

    A step sets `name` and `description` and implements `execute`.
    Problems with the file itself go into `ctx.result` (warnings, errors,
    `fail()`); an exception means the step could not run at all.
    """

    name: str = "unnamed_step"
    description: str = "No description"
    # When True, exceptions from execute() abort the invocation.
    propagate_errors: bool = False

    @abstractmethod
    async def execute(self, ctx: DispatchContext) -> StepResult:
        ...

    async def should_skip(self, ctx: DispatchContext) -> bool:
        """Extraction steps stop once the result is final (size gate, failed download)."""
        return ctx.finished

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _step_result(
        self,
        status: StepStatus,
        started_at: datetime,
        error: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        finished_at = self._now()
        elapsed = finished_at - started_at
        return StepResult(
            step_name=self.name,
            status=status,
            started_at=started_at,
            completed_at=finished_at,
            duration_ms=int(elapsed.total_seconds() * 1000),
            error=error,
            metadata=dict(metadata or {}),
        )

    def _success(self, started_at: datetime, metadata: dict[str, Any] | None = None) -> StepResult:
        return self._step_result(StepStatus.COMPLETED, started_at, metadata=metadata)

    def _failure(
        self,
        started_at: datetime,
        error: str,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        return self._step_result(StepStatus.FAILED, started_at, error=error, metadata=metadata)
