"""
ZIP-in-ZIP traversal for dispatch archives.

Distributors ship LETTURE data as an outer ZIP holding a few flat
CSV/XML files and many nested ZIPs (usually one per day or per POD
batch).  The walker:

    1. Opens the outer archive and partitions its entries by suffix.
    2. Exposes flat CSV/XML entries for immediate parsing.
    3. Walks one nested ZIP at a time, parsing its CSV/XML entries.

Nested archives are always listed in sorted order so a chunk index maps
to the same entries on every invocation.
"""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field

from dispatch.core.logging import get_logger
from dispatch.parsing.letture import parse_pod_entry
from dispatch.pipeline.chunking import Deadline
from dispatch.pipeline.errors import ExtractionError

logger = get_logger(__name__)

TEXT_SUFFIXES = (".csv", ".xml")


def decode_text(data: bytes) -> str:
    """Decode entry bytes as UTF-8, tolerating a BOM and bad bytes."""
    return data.decode("utf-8-sig", errors="replace")


@dataclass
class NestedWalkResult:
    """Output of walking a single nested archive."""

    pods: list[str] = field(default_factory=list)
    files_processed: int = 0
    files_skipped: int = 0
    timed_out: bool = False
    remaining_entries: int = 0


class ArchiveWalker:
    """Read-only view over an in-memory ZIP archive."""

    def __init__(self, data: bytes) -> None:
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
            raise ExtractionError(f"Invalid ZIP archive: {exc}") from exc

        names = sorted(info.filename for info in self._zip.infolist() if not info.is_dir())
        self.csv_entries = [n for n in names if n.lower().endswith(".csv")]
        self.xml_entries = [n for n in names if n.lower().endswith(".xml")]
        self.nested_zips = [n for n in names if n.lower().endswith(".zip")]
        self.total_entries = len(names)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ArchiveWalker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def read_bytes(self, name: str) -> bytes:
        return self._zip.read(name)

    def read_text(self, name: str) -> str:
        return decode_text(self._zip.read(name))

    def walk_nested(
        self,
        name: str,
        deadline: Deadline | None = None,
        max_files: int | None = None,
    ) -> NestedWalkResult:
        """
        Parse every CSV/XML entry of one nested archive.

        Entries past `max_files` and entries that fail to read or parse
        are counted as skipped.  Raises ExtractionError for any failure
        opening the nested archive itself.
        """
        result = NestedWalkResult()

        try:
            nested = zipfile.ZipFile(io.BytesIO(self._zip.read(name)))
        except Exception as exc:
            # zipfile raises several unrelated types for damaged members
            raise ExtractionError(f"Cannot open nested ZIP {name}: {exc}") from exc

        with nested:
            entries = sorted(
                info.filename
                for info in nested.infolist()
                if not info.is_dir() and info.filename.lower().endswith(TEXT_SUFFIXES)
            )
            if max_files is not None and len(entries) > max_files:
                result.files_skipped += len(entries) - max_files
                entries = entries[:max_files]

            for position, entry in enumerate(entries):
                if deadline is not None and deadline.expired():
                    result.timed_out = True
                    result.remaining_entries = len(entries) - position
                    break
                try:
                    text = decode_text(nested.read(entry))
                    result.pods.extend(parse_pod_entry(entry, text))
                    result.files_processed += 1
                except Exception as exc:
                    result.files_skipped += 1
                    logger.warning("Nested entry skipped", archive=name, entry=entry, error=str(exc))

        return result
