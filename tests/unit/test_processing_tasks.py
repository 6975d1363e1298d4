"""Tests for the Celery processing task (no broker, no database)."""

from unittest.mock import AsyncMock

from dispatch.pipeline.context import ProcessRequest
from dispatch.tasks import processing_tasks


def test_task_runs_exactly_one_chunk(monkeypatch):
    response = {
        "success": True,
        "fileId": "f1",
        "fileName": "letture.zip",
        "fileType": "LETTURE",
        "chunkIndex": 1,
        "processingTimeMs": 42,
        "result": {"success": True, "more_chunks_needed": True, "next_chunk_index": 2},
    }
    process_mock = AsyncMock(return_value=response)
    monkeypatch.setattr(processing_tasks, "_process", process_mock)

    returned = processing_tasks.process_dispatch_file.run("f1", "job-1", user_id="u1", chunk_index=1)

    assert returned == response
    process_mock.assert_awaited_once_with(
        ProcessRequest(file_id="f1", job_id="job-1", user_id="u1", action=None, chunk_index=1)
    )


def test_task_is_routed_to_dispatch_queue():
    routes = processing_tasks.celery_app.conf.task_routes

    assert routes["dispatch.tasks.processing_tasks.*"] == {"queue": "dispatch"}
    assert processing_tasks.celery_app.conf.task_soft_time_limit > 45
