"""Tests for Deadline and BatchWindow."""

import pytest

from dispatch.pipeline.chunking import BatchWindow, Deadline

from conftest import FakeClock


class TestDeadline:
    def test_expires_only_after_budget(self):
        clock = FakeClock()
        deadline = Deadline(45000, clock=clock)

        clock.advance(45.0)
        assert not deadline.expired()
        assert deadline.remaining_ms == 0

        clock.advance(0.01)
        assert deadline.expired()

    def test_elapsed_in_milliseconds(self):
        clock = FakeClock()
        deadline = Deadline(1000, clock=clock)

        clock.advance(0.25)

        assert deadline.elapsed_ms == 250
        assert deadline.remaining_ms == 750


class TestBatchWindow:
    def test_first_chunk_of_250(self):
        window = BatchWindow.for_chunk(0, total=250, batch_size=100)

        assert (window.start, window.end) == (0, 100)
        assert window.more_chunks_needed is True
        assert window.next_chunk_index == 1
        assert window.total_chunks_needed == 3

    def test_last_chunk_of_250(self):
        window = BatchWindow.for_chunk(2, total=250, batch_size=100)

        assert (window.start, window.end) == (200, 250)
        assert window.size == 50
        assert window.more_chunks_needed is False
        assert window.next_chunk_index is None

    @pytest.mark.parametrize("total", [1, 99, 100, 101, 250, 1000])
    def test_bounds_hold_for_every_in_range_chunk(self, total):
        batch = 100
        for chunk in range(BatchWindow.for_chunk(0, total, batch).total_chunks_needed):
            window = BatchWindow.for_chunk(chunk, total, batch)

            assert chunk * batch <= window.end <= total
            assert window.more_chunks_needed == (window.end < total)
            assert not window.out_of_range

    def test_no_nested_archives_is_one_chunk(self):
        window = BatchWindow.for_chunk(0, total=0, batch_size=100)

        assert window.size == 0
        assert window.total_chunks_needed == 1
        assert window.more_chunks_needed is False
        assert not window.out_of_range

    def test_chunk_past_the_end(self):
        window = BatchWindow.for_chunk(5, total=250, batch_size=100)

        assert window.out_of_range
        assert window.size == 0
        assert window.more_chunks_needed is False

    @pytest.mark.parametrize("chunk, batch", [(-1, 100), (0, 0)])
    def test_rejects_invalid_arguments(self, chunk, batch):
        with pytest.raises(ValueError):
            BatchWindow.for_chunk(chunk, total=10, batch_size=batch)
