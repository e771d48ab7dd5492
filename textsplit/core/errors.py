"""
errors.py — Split/Join Error Taxonomy
=======================================
Every fatal condition names the operation and the offending path.
Cleanup failures during join are not errors; they are reported on
the JoinResult instead.
"""

from typing import Optional


class ChunkingError(Exception):
    """Base class for all split/join/archive failures."""

    def __init__(self, operation: str, path: str, reason: str):
        self.operation = operation
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{operation} failed for {self.path}: {reason}")


class NotFound(ChunkingError):
    """Source file missing, or no chunk files match a base path."""


class InvalidArgument(ChunkingError, ValueError):
    """Non-positive or unparsable chunk size, or an unsupported request."""


class CorruptChunk(ChunkingError, ValueError):
    """A chunk file's content does not decode to a valid payload."""

    def __init__(self, operation: str, path: str, reason: str, index: Optional[int] = None):
        self.index = index
        super().__init__(operation, path, reason)


class IOFailure(ChunkingError):
    """Underlying read, write or delete failure."""

    def __init__(
        self,
        operation: str,
        path: str,
        reason: str,
        chunks_written: Optional[int] = None,
    ):
        self.chunks_written = chunks_written
        if chunks_written is not None:
            reason = f"{reason} ({chunks_written} chunk files already written)"
        super().__init__(operation, path, reason)
