"""
Shared test fixtures and configuration for the entire test suite.

Provides: in-memory ZIP builders, file record factories, fake fetcher and clock
Dependencies: pytest
System role: Test infrastructure; no network or database is touched
"""

import io
import struct
import uuid
import zipfile

import pytest

from dispatch.pipeline.context import FileRecord
from dispatch.repositories.store import InMemoryDispatchStore

MB = 1024 * 1024


def pod(n: int, distributor: str = "001") -> str:
    """A well-formed POD code: IT + 3 chars + E + 8 digits."""
    return f"IT{distributor}E{n:08d}"


def build_zip(entries: dict[str, bytes | str], compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build a ZIP archive in memory from name → content."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression) as zf:
        for name, content in entries.items():
            zf.writestr(name, content.encode("utf-8") if isinstance(content, str) else content)
    return buffer.getvalue()


def corrupt_member(data: bytes, name: str) -> bytes:
    """Flip the first data byte of a member so reading it fails the CRC check."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        offset = zf.getinfo(name).header_offset
    name_len, extra_len = struct.unpack("<HH", data[offset + 26:offset + 30])
    buf = bytearray(data)
    buf[offset + 30 + name_len + extra_len] ^= 0xFF
    return bytes(buf)


def set_compression_method(data: bytes, name: str, method: int) -> bytes:
    """Rewrite a member's compression method in the central directory."""
    buf = bytearray(data)
    eocd = data.rfind(b"PK\x05\x06")
    count, _size, position = struct.unpack("<HII", data[eocd + 10:eocd + 20])
    for _ in range(count):
        name_len, extra_len, comment_len = struct.unpack("<HHH", data[position + 28:position + 34])
        if data[position + 46:position + 46 + name_len] == name.encode():
            struct.pack_into("<H", buf, position + 10, method)
        position += 46 + name_len + extra_len + comment_len
    return bytes(buf)


def letture_csv(pods: list[str]) -> str:
    rows = ["POD;DATA;ENERGIA"] + [f"{p};2024-03-01;1,5" for p in pods]
    return "\n".join(rows) + "\n"


def nested_letture_zip(count: int, pods_per_zip: int = 1) -> bytes:
    """Outer ZIP with `count` nested ZIPs, each holding one LETTURE CSV."""
    entries = {}
    for i in range(count):
        pods = [pod(i * pods_per_zip + j) for j in range(pods_per_zip)]
        entries[f"day_{i:04d}.zip"] = build_zip({f"letture_{i:04d}.csv": letture_csv(pods)})
    return build_zip(entries)


class FakeFetcher:
    """Returns fixed bytes and records every URL requested."""

    def __init__(self, content: bytes | None = b"") -> None:
        self.content = content
        self.calls: list[str] = []

    async def download(self, file_url: str) -> bytes | None:
        self.calls.append(file_url)
        return self.content


class FakeClock:
    """Monotonic clock advanced by hand, or by `step` on every read."""

    def __init__(self, step: float = 0.0) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_file():
    """Factory for FileRecord rows with sensible defaults."""

    def _make(file_name: str, file_type: str, size_mb: float = 1.0, **kwargs) -> FileRecord:
        return FileRecord(
            id=kwargs.pop("id", str(uuid.uuid4())),
            file_name=file_name,
            file_url=f"https://project.supabase.co/storage/v1/object/public/dispatch-files/{file_name}",
            file_type=file_type,
            file_size=int(size_mb * MB),
            **kwargs,
        )

    return _make


@pytest.fixture
def store():
    return InMemoryDispatchStore()


@pytest.fixture
def job_id():
    return str(uuid.uuid4())
