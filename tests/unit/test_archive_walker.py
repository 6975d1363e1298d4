"""Tests for ZIP-in-ZIP traversal."""

import zipfile

import pytest

from dispatch.archive.walker import ArchiveWalker, decode_text
from dispatch.pipeline.chunking import Deadline
from dispatch.pipeline.errors import ExtractionError

from conftest import (
    FakeClock,
    build_zip,
    corrupt_member,
    letture_csv,
    pod,
    set_compression_method,
)


def test_partitions_and_sorts_entries():
    data = build_zip({
        "b.zip": build_zip({"x.csv": "POD\n"}),
        "a.zip": build_zip({"y.csv": "POD\n"}),
        "top.CSV": "POD\n",
        "top.xml": "<POD/>",
        "readme.txt": "ignored",
    })

    with ArchiveWalker(data) as walker:
        assert walker.nested_zips == ["a.zip", "b.zip"]
        assert walker.csv_entries == ["top.CSV"]
        assert walker.xml_entries == ["top.xml"]
        assert walker.total_entries == 5


def test_invalid_archive_raises():
    with pytest.raises(ExtractionError):
        ArchiveWalker(b"not a zip")


def test_walk_nested_parses_csv_and_xml():
    inner = build_zip({
        "1.csv": letture_csv([pod(1), pod(2)]),
        "2.xml": f"<CodPod>{pod(3)}</CodPod>",
        "notes.txt": "skip me",
    })
    data = build_zip({"day.zip": inner})

    with ArchiveWalker(data) as walker:
        walk = walker.walk_nested("day.zip")

    assert walk.pods == [pod(1), pod(2), pod(3)]
    assert walk.files_processed == 2
    assert walk.files_skipped == 0
    assert not walk.timed_out


def test_walk_nested_caps_files():
    inner = build_zip({f"{i:03d}.csv": letture_csv([pod(i)]) for i in range(5)})
    data = build_zip({"day.zip": inner})

    with ArchiveWalker(data) as walker:
        walk = walker.walk_nested("day.zip", max_files=3)

    assert walk.pods == [pod(0), pod(1), pod(2)]
    assert walk.files_processed == 3
    assert walk.files_skipped == 2


def test_walk_nested_stops_at_deadline():
    inner = build_zip({f"{i:03d}.csv": letture_csv([pod(i)]) for i in range(4)})
    data = build_zip({"day.zip": inner})
    clock = FakeClock()
    deadline = Deadline(100, clock=clock)
    clock.advance(1.0)

    with ArchiveWalker(data) as walker:
        walk = walker.walk_nested("day.zip", deadline=deadline)

    assert walk.timed_out
    assert walk.remaining_entries == 4
    assert walk.pods == []


def test_corrupt_nested_archive_raises():
    data = build_zip({"broken.zip": b"garbage bytes"})

    with ArchiveWalker(data) as walker:
        with pytest.raises(ExtractionError):
            walker.walk_nested("broken.zip")


def test_unreadable_nested_archive_raises_extraction_error():
    data = build_zip({
        "a.zip": build_zip({"a.csv": letture_csv([pod(1)])}),
        "b.zip": build_zip({"b.csv": letture_csv([pod(2)])}),
    })
    # method 9 (Deflate64) is not supported by zipfile
    data = set_compression_method(data, "b.zip", 9)

    with ArchiveWalker(data) as walker:
        assert walker.walk_nested("a.zip").pods == [pod(1)]
        with pytest.raises(ExtractionError):
            walker.walk_nested("b.zip")


def test_damaged_entry_inside_nested_archive_is_skipped():
    """
    Arrange: nested ZIP whose first CSV fails its CRC check
    Act: walk the nested ZIP
    Assert: the damaged entry is counted as skipped, the next one is parsed
    """
    inner = build_zip(
        {"a.csv": letture_csv([pod(1)]), "b.csv": letture_csv([pod(2)])},
        compression=zipfile.ZIP_STORED,
    )
    data = build_zip({"day.zip": corrupt_member(inner, "a.csv")})

    with ArchiveWalker(data) as walker:
        walk = walker.walk_nested("day.zip")

    assert walk.pods == [pod(2)]
    assert walk.files_processed == 1
    assert walk.files_skipped == 1


def test_decode_text_strips_bom_and_replaces_bad_bytes():
    assert decode_text(b"\xef\xbb\xbfPOD") == "POD"
    assert decode_text(b"POD\xff") == "POD\ufffd"
