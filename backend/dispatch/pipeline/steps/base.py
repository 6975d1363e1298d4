"""
Shared plumbing for steps: injected dependencies and CSV source iteration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Protocol

from dispatch.archive.walker import ArchiveWalker, decode_text
from dispatch.core.config import settings
from dispatch.core.logging import get_logger
from dispatch.pipeline.context import DispatchContext
from dispatch.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from dispatch.repositories.store import DispatchStore

logger = get_logger(__name__)


class Fetcher(Protocol):
    async def download(self, file_url: str) -> bytes | None: ...


@dataclass(frozen=True)
class ProcessorConfig:
    """Budget and batching limits for one invocation."""

    max_processing_time_ms: int = 45000
    batch_size: int = 100
    max_file_mb: float = 50.0
    max_files_per_nested_zip: int = 100

    @classmethod
    def from_settings(cls) -> "ProcessorConfig":
        return cls(
            max_processing_time_ms=settings.MAX_PROCESSING_TIME_MS,
            batch_size=settings.NESTED_ZIP_BATCH_SIZE,
            max_file_mb=settings.MAX_DOWNLOADABLE_FILE_MB,
            max_files_per_nested_zip=settings.MAX_FILES_PER_NESTED_ZIP,
        )


@dataclass(frozen=True)
class StepDependencies:
    """Collaborators handed to flow builders."""

    store: "DispatchStore"
    fetcher: Fetcher
    config: ProcessorConfig


class CsvSourceStep(PipelineStep):
    """
    Base for steps that read one CSV or a ZIP of CSVs.

    Subclasses set `timeout_warning` and call `iter_csv_sources`.
    """

    timeout_warning = "Timeout during processing"

    def iter_csv_sources(self, ctx: DispatchContext) -> Iterator[tuple[str, str]]:
        """Yield (entry_name, text) for every CSV in the downloaded file."""
        name = ctx.file.lower_name
        content = ctx.content or b""

        if name.endswith(".zip"):
            with ArchiveWalker(content) as walker:
                for entry in walker.csv_entries:
                    if ctx.deadline.expired():
                        ctx.warn(self.timeout_warning)
                        return
                    try:
                        text = walker.read_text(entry)
                    except Exception as exc:
                        logger.warning("Archive entry skipped", entry=entry, error=str(exc))
                        continue
                    yield entry, text
        elif name.endswith(".csv"):
            yield ctx.file.file_name, decode_text(content)
        else:
            ctx.warn(f"Estensione file non supportata: {ctx.file.file_name}")
            logger.warning("Unsupported file extension", file_name=ctx.file.file_name)
