"""
Celery tasks — dispatch file processing.

Wires the DispatchProcessor into the Celery task system.  One task call
processes exactly one chunk; scheduling the next chunk is left to the
caller, which reads `more_chunks_needed` / `next_chunk_index` from the
returned response.
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from dispatch.core.config import settings
from dispatch.pipeline.context import ProcessRequest
from dispatch.pipeline.engine import DispatchProcessor
from dispatch.repositories.store import SqlDispatchStore
from dispatch.storage.blob_fetcher import BlobFetcher
from dispatch.tasks import celery_app

logger = structlog.get_logger("tasks.processing")


async def _process(request: ProcessRequest) -> dict:
    """Run one invocation with a fresh engine to avoid event-loop conflicts."""
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            async with session.begin():
                processor = DispatchProcessor(
                    store=SqlDispatchStore(session),
                    fetcher=BlobFetcher(),
                )
                outcome = await processor.process(request)
        return outcome.to_response()
    finally:
        await engine.dispose()


@celery_app.task(bind=True, name="dispatch.tasks.processing_tasks.process_dispatch_file")
def process_dispatch_file(
    self,
    file_id: str,
    job_id: str,
    user_id: str | None = None,
    action: str | None = None,
    chunk_index: int = 0,
):
    """Process one chunk of a dispatch file and return the response dict."""
    task_log = logger.bind(
        task_id=self.request.id,
        file_id=file_id,
        job_id=job_id,
        chunk_index=chunk_index,
    )
    task_log.info("Processing task started")

    try:
        response = asyncio.run(_process(ProcessRequest(
            file_id=file_id,
            job_id=job_id,
            user_id=user_id,
            action=action,
            chunk_index=chunk_index,
        )))
    except Exception as exc:
        task_log.exception("Processing task failed", error=str(exc))
        raise

    result = response["result"]
    task_log.info(
        "Processing task finished",
        success=response["success"],
        processing_time_ms=response["processingTimeMs"],
        more_chunks_needed=result.get("more_chunks_needed"),
        next_chunk_index=result.get("next_chunk_index"),
    )
    return response
