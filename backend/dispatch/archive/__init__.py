"""In-memory ZIP archive traversal."""

from dispatch.archive.walker import ArchiveWalker, NestedWalkResult, decode_text

__all__ = ["ArchiveWalker", "NestedWalkResult", "decode_text"]
