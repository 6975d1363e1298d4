"""
Time-boxing primitives for chunked processing.

The processor runs under a hosting time limit, so work is split two ways:
    - Deadline: a wall-clock budget checked cooperatively between units
      of work.  When it expires the current invocation stops and returns
      what it has.
    - BatchWindow: the slice of nested archives assigned to one
      invocation.  The caller re-invokes with `next_chunk_index` until
      `more_chunks_needed` is False.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable


class Deadline:
    """Wall-clock budget for a single invocation."""

    def __init__(
        self,
        budget_ms: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.budget_ms = budget_ms
        self._clock = clock
        self._started = clock()

    @property
    def elapsed_ms(self) -> int:
        return int((self._clock() - self._started) * 1000)

    @property
    def remaining_ms(self) -> int:
        return max(0, self.budget_ms - self.elapsed_ms)

    def expired(self) -> bool:
        return self.elapsed_ms > self.budget_ms


@dataclass(frozen=True)
class BatchWindow:
    """Slice `[start, end)` of nested archives handled by one chunk."""

    chunk_index: int
    batch_size: int
    total: int
    start: int
    end: int

    @classmethod
    def for_chunk(cls, chunk_index: int, total: int, batch_size: int) -> "BatchWindow":
        if chunk_index < 0:
            raise ValueError(f"chunk_index must be >= 0, got {chunk_index}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {batch_size}")
        start = chunk_index * batch_size
        return cls(
            chunk_index=chunk_index,
            batch_size=batch_size,
            total=total,
            start=start,
            end=min(start + batch_size, total),
        )

    @property
    def out_of_range(self) -> bool:
        """True when the chunk starts past the last archive."""
        return self.start > self.total or (self.start == self.total and self.total > 0)

    @property
    def size(self) -> int:
        return max(0, self.end - self.start)

    @property
    def more_chunks_needed(self) -> bool:
        return self.end < self.total

    @property
    def next_chunk_index(self) -> int | None:
        return self.chunk_index + 1 if self.more_chunks_needed else None

    @property
    def total_chunks_needed(self) -> int:
        return max(1, math.ceil(self.total / self.batch_size))
