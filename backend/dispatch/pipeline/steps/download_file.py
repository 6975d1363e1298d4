"""
DownloadFileStep — fetches the file bytes from object storage.

A failed download is a soft failure: the result is marked
`success: false, error: "Could not download file"`, later extract steps
skip, and the failed row is still persisted.
"""

from __future__ import annotations

from dispatch.core.constants import DOWNLOAD_FAILED_ERROR
from dispatch.core.logging import get_logger
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.step import PipelineStep
from dispatch.pipeline.steps.base import Fetcher

logger = get_logger(__name__)


class DownloadFileStep(PipelineStep):
    """Download the dispatch file into ctx.content."""

    name = "download_file"
    description = "Download raw file from object storage"

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()

        ctx.download_attempted = True
        content = await self.fetcher.download(ctx.file.file_url)

        if content is None:
            ctx.result.fail(DOWNLOAD_FAILED_ERROR)
            ctx.add_error(f"Download failed for {ctx.file.file_name}")
            return self._failure(started_at, DOWNLOAD_FAILED_ERROR)

        ctx.content = content
        logger.info("File downloaded", file_name=ctx.file.file_name, bytes=len(content))
        return self._success(started_at, metadata={"bytes": len(content)})
