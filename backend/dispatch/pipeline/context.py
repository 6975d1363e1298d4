"""
DispatchContext — mutable state object carried through every step.

One context per processor invocation.  Early steps fill in the file
bytes and continuation snapshot; the extract step fills in the typed
result; the persist step records the row id.  The engine logs a compact
summary at the end for auditability.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from dispatch.pipeline.chunking import Deadline
from dispatch.pipeline.results import ProcessingResult


# ═══════════════════════════════════════════════════════════
#  FileRecord / ChunkRecord: storage-agnostic row views
# ═══════════════════════════════════════════════════════════

@dataclass
class FileRecord:
    """The fields of a dispatch_files row the processor needs."""

    id: str
    file_name: str
    file_url: str
    file_type: str
    file_size: int = 0
    zone_code: str | None = None
    month_reference: str | None = None

    @property
    def file_size_mb(self) -> float:
        return (self.file_size or 0) / (1024 * 1024)

    @property
    def lower_name(self) -> str:
        return self.file_name.lower()


@dataclass
class ChunkRecord:
    """A completed intermediate result row for one chunk."""

    chunk_index: int
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ContinuationSnapshot:
    """Progress recovered from completed chunk rows of earlier invocations."""

    completed_chunks: list[int] = field(default_factory=list)
    previous_pods: set[str] = field(default_factory=set)

    @property
    def next_unprocessed_chunk(self) -> int:
        return max(self.completed_chunks) + 1 if self.completed_chunks else 0


# ═══════════════════════════════════════════════════════════
#  ProcessRequest / StepResult
# ═══════════════════════════════════════════════════════════

@dataclass
class ProcessRequest:
    """One invocation request, as received from the caller."""

    file_id: str
    job_id: str
    user_id: str | None = None
    action: str | None = None
    chunk_index: int = 0
    total_chunks: int | None = None


@dataclass
class StepResult:
    """Timing and outcome of one step; `metadata` holds step-specific counters."""

    step_name: str
    status: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("started_at", "completed_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


# ═══════════════════════════════════════════════════════════
#  DispatchContext
# ═══════════════════════════════════════════════════════════

@dataclass
class DispatchContext:
    """Carries all state between steps of one invocation."""

    # ─── Identity (set at init) ────────────────────────
    request: ProcessRequest
    file: FileRecord
    deadline: Deadline
    result: ProcessingResult
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ─── Populated by steps ────────────────────────────
    content: bytes | None = None
    download_attempted: bool = False
    continuation: ContinuationSnapshot = field(default_factory=ContinuationSnapshot)
    persisted_row_id: str | None = None
    duplicate_chunk: bool = False

    # ─── Execution tracking ────────────────────────────
    step_results: list[StepResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def chunk_index(self) -> int:
        return self.request.chunk_index

    @property
    def finished(self) -> bool:
        """True once the result is final (size-gated or failed)."""
        return self.result.skipped_due_to_size or not self.result.success

    def warn(self, message: str) -> None:
        self.result.warnings.append(message)

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging."""
        return {
            "execution_id": self.execution_id,
            "file_id": self.file.id,
            "file_type": self.file.file_type,
            "job_id": self.request.job_id,
            "chunk_index": self.chunk_index,
            "success": self.result.success,
            "skipped_due_to_size": self.result.skipped_due_to_size,
            "warnings": len(self.result.warnings),
            "elapsed_ms": self.deadline.elapsed_ms,
            "steps_completed": len(self.step_results),
            "errors": self.errors,
        }
