"""
ExtractLettureStep — pulls POD codes out of meter-reading archives.

ZIP files are processed in chunks of nested archives:

    chunk 0      top-level CSV/XML entries + nested ZIPs [0, batch)
    chunk k > 0  nested ZIPs [k*batch, (k+1)*batch)

Flat CSV/XML uploads fit in a single chunk.  The deadline is checked
before every top-level entry, before every nested ZIP and inside each
nested ZIP; on expiry the step stops and reports what is left.
"""

from __future__ import annotations

from dispatch.archive.walker import ArchiveWalker, decode_text
from dispatch.core.logging import get_logger
from dispatch.parsing.letture import parse_letture_csv, parse_letture_xml
from dispatch.pipeline.chunking import BatchWindow
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.errors import ExtractionError
from dispatch.pipeline.results import LettureResult
from dispatch.pipeline.step import PipelineStep
from dispatch.pipeline.steps.base import ProcessorConfig

logger = get_logger(__name__)


class ExtractLettureStep(PipelineStep):
    """Extract POD codes for one chunk of a LETTURE file."""

    name = "extract_letture"
    description = "Extract POD codes from LETTURE CSV/XML/ZIP"

    def __init__(self, config: ProcessorConfig) -> None:
        self.batch_size = config.batch_size
        self.max_files_per_nested_zip = config.max_files_per_nested_zip

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()
        result: LettureResult = ctx.result  # type: ignore[assignment]
        result.chunk_index = ctx.chunk_index

        name = ctx.file.lower_name
        content = ctx.content or b""

        if name.endswith(".zip"):
            pods = self._process_zip(ctx, result, content)
        elif name.endswith(".csv"):
            pods = parse_letture_csv(decode_text(content))
            result.files_processed = 1
        elif name.endswith(".xml"):
            pods = parse_letture_xml(decode_text(content))
            result.files_processed = 1
        else:
            pods = []
            ctx.warn(f"Estensione file non supportata: {ctx.file.file_name}")

        result.set_pods(pods)

        logger.info(
            "LETTURE chunk extracted",
            chunk_index=result.chunk_index,
            total_pods=result.total_pods,
            files_processed=result.files_processed,
            files_skipped=result.files_skipped,
            more_chunks_needed=result.more_chunks_needed,
            timed_out=result.timed_out,
        )

        return self._success(started_at, metadata={
            "total_pods": result.total_pods,
            "files_processed": result.files_processed,
            "files_skipped": result.files_skipped,
            "timed_out": result.timed_out,
        })

    # ─── ZIP handling ──────────────────────────────────

    def _process_zip(self, ctx: DispatchContext, result: LettureResult, content: bytes) -> list[str]:
        pods: list[str] = []

        with ArchiveWalker(content) as walker:
            window = BatchWindow.for_chunk(ctx.chunk_index, len(walker.nested_zips), self.batch_size)
            result.nested_zips_total = window.total
            result.total_chunks_needed = window.total_chunks_needed
            result.more_chunks_needed = window.more_chunks_needed
            result.next_chunk_index = window.next_chunk_index

            logger.info(
                "ZIP opened",
                entries=walker.total_entries,
                csv=len(walker.csv_entries),
                xml=len(walker.xml_entries),
                nested_zips=window.total,
                window_start=window.start,
                window_end=window.end,
            )

            if window.out_of_range:
                ctx.warn(
                    f"Chunk {window.chunk_index} fuori intervallo: "
                    f"{window.total} ZIP annidati ({window.total_chunks_needed} chunk)"
                )

            if ctx.chunk_index == 0 and not self._process_top_level(ctx, result, walker, pods):
                return pods

            for position, nested_name in enumerate(walker.nested_zips[window.start:window.end]):
                if ctx.deadline.expired():
                    result.timed_out = True
                    ctx.warn(f"Timeout: {window.size - position} nested ZIPs remaining in chunk")
                    break

                try:
                    walk = walker.walk_nested(
                        nested_name,
                        deadline=ctx.deadline,
                        max_files=self.max_files_per_nested_zip,
                    )
                except ExtractionError as exc:
                    result.files_skipped += 1
                    logger.warning("Nested ZIP skipped", archive=nested_name, error=str(exc))
                    continue

                pods.extend(walk.pods)
                result.files_processed += walk.files_processed
                result.files_skipped += walk.files_skipped

                if walk.timed_out:
                    result.timed_out = True
                    ctx.warn(
                        f"Timeout: {walk.remaining_entries} files remaining in {nested_name}, "
                        f"{window.size - position - 1} nested ZIPs remaining in chunk"
                    )
                    break

        return pods

    def _process_top_level(
        self,
        ctx: DispatchContext,
        result: LettureResult,
        walker: ArchiveWalker,
        pods: list[str],
    ) -> bool:
        """Parse flat CSV then XML entries.  Returns False on timeout."""
        for parser, entries, label in (
            (parse_letture_csv, walker.csv_entries, "CSV"),
            (parse_letture_xml, walker.xml_entries, "XML"),
        ):
            for position, entry in enumerate(entries):
                if ctx.deadline.expired():
                    result.timed_out = True
                    ctx.warn(f"Timeout: {len(entries) - position} {label} files remaining")
                    return False
                try:
                    pods.extend(parser(walker.read_text(entry)))
                except Exception as exc:
                    result.files_skipped += 1
                    logger.warning("Top-level entry skipped", entry=entry, error=str(exc))
                    continue
                result.files_processed += 1
        return True
