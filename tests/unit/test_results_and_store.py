"""Tests for tagged result payloads and the in-memory result store."""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from dispatch.core.constants import DispatchFileType
from dispatch.pipeline.errors import PersistenceError
from dispatch.pipeline.results import (
    AggrIpResult,
    LettureResult,
    ProcessingResult,
    new_result,
    result_from_dict,
)
from dispatch.repositories import intermediate_results
from dispatch.repositories.intermediate_results import chunk_result_pattern, chunk_result_type
from dispatch.repositories.store import SqlDispatchStore


class TestResults:
    def test_new_result_picks_variant(self):
        assert isinstance(new_result("LETTURE"), LettureResult)
        assert isinstance(new_result(DispatchFileType.AGGR_IP), AggrIpResult)

    def test_unknown_type_gets_base_variant(self):
        result = new_result("MISTERO")

        assert type(result) is ProcessingResult
        assert result.kind == "MISTERO"

    def test_set_pods_dedupes_in_order(self):
        result = LettureResult()

        result.set_pods(["IT001E00000002", "IT001E00000001", "IT001E00000002"])

        assert result.pod_codes == ["IT001E00000002", "IT001E00000001"]
        assert result.total_pods == 2

    def test_round_trip_through_dict_keeps_variant(self):
        original = LettureResult(chunk_index=3, more_chunks_needed=True, next_chunk_index=4)
        original.warnings.append("w")

        rebuilt = result_from_dict(original.to_dict())

        assert isinstance(rebuilt, LettureResult)
        assert rebuilt == original

    def test_fail_sets_error(self):
        result = new_result("IP_DETAIL").fail("Could not download file")

        assert result.success is False
        assert result.to_dict()["error"] == "Could not download file"


def test_result_type_naming():
    assert chunk_result_type("LETTURE", 0) == "letture_chunk_0"
    assert chunk_result_pattern("LETTURE") == "letture_chunk_%"


class TestInMemoryStore:
    def _row(self, job_id, status="completed", chunk_index=0, pods=None):
        return dict(
            job_id=job_id,
            user_id=None,
            file_id="file-1",
            file_type="LETTURE",
            chunk_index=chunk_index,
            zone_code="NORD",
            status=status,
            data={"pod_codes": pods or []},
            error_message=None,
            processing_time_ms=10,
        )

    @pytest.mark.asyncio
    async def test_duplicate_completed_chunk_is_ignored(self, store, job_id):
        first = await store.insert_result(**self._row(job_id))
        second = await store.insert_result(**self._row(job_id))

        assert first is not None
        assert second is None
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_failed_rows_may_repeat(self, store, job_id):
        await store.insert_result(**self._row(job_id, status="failed"))
        await store.insert_result(**self._row(job_id, status="failed"))
        completed = await store.insert_result(**self._row(job_id))

        assert completed is not None
        assert len(store.rows) == 3

    @pytest.mark.asyncio
    async def test_completed_chunks_filters_and_orders(self, store, job_id):
        await store.insert_result(**self._row(job_id, chunk_index=1, pods=["B"]))
        await store.insert_result(**self._row(job_id, chunk_index=0, pods=["A"]))
        await store.insert_result(**self._row(job_id, chunk_index=2, status="failed"))
        await store.insert_result(**self._row("other-job", chunk_index=5))

        chunks = await store.completed_chunks(job_id=job_id, file_id="file-1", file_type="LETTURE")

        assert [c.chunk_index for c in chunks] == [0, 1]
        assert chunks[0].data["pod_codes"] == ["A"]
        assert store.rows[0]["result_type"] == "letture_chunk_1"


class TestSqlStore:
    @pytest.mark.asyncio
    async def test_non_uuid_file_id_is_not_found(self):
        session = AsyncMock()

        assert await SqlDispatchStore(session).get_file("not-a-uuid") is None
        session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_errors_become_persistence_errors(self, monkeypatch):
        monkeypatch.setattr(
            intermediate_results, "insert_result", AsyncMock(side_effect=SQLAlchemyError("boom"))
        )

        with pytest.raises(PersistenceError):
            await SqlDispatchStore(AsyncMock()).insert_result(
                job_id=str(uuid.uuid4()),
                file_id=str(uuid.uuid4()),
                file_type="LETTURE",
                chunk_index=0,
                status="completed",
                data={},
                processing_time_ms=1,
            )
