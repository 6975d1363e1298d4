"""
Exceptions raised by the dispatch processor.

Bad rows, unreadable entries and oversized files are not exceptional:
they end up as warnings, skip counters or a failed result.  The classes
here cover what stops a step or the whole invocation.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Root of the processor's exceptions; carries logging context."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}


class FlowResolutionError(DispatchError):
    """The file type has no registered step sequence."""


class DispatchFileNotFoundError(DispatchError):
    """No dispatch file row matches the requested id."""


class StorageError(DispatchError):
    """Download from object storage failed; `status_code` is set for HTTP errors."""

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code


class ExtractionError(DispatchError):
    """An archive or one of its entries could not be read."""


class PersistenceError(DispatchError):
    """The intermediate result row could not be written."""
