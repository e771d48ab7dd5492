"""
manifest.py — Ordered Chunk Set Models
========================================
An explicit, ordered view of one chunk set. It is built from the
files present on disk (split result or join discovery); the file names
remain the only persisted record, no manifest file is ever written.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from textsplit.core.errors import NotFound
from textsplit.core.naming import (
    chunk_path,
    discovery_pattern,
    find_chunk_files,
    parse_index,
)

logger = logging.getLogger(__name__)


class ChunkEntry(BaseModel):
    """One chunk file of a chunk set."""

    index: int                   # 1-based sequence index
    path: str
    size: Optional[int] = None   # Raw payload bytes, known after split


class ChunkManifest(BaseModel):
    """Chunk files of one base path, in sequence order."""

    base_path: str
    chunk_size: Optional[int] = None
    chunks: List[ChunkEntry] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.chunks)

    @property
    def paths(self) -> List[str]:
        return [c.path for c in self.chunks]

    @property
    def total_bytes(self) -> Optional[int]:
        """Sum of payload sizes, or None when sizes are unknown."""
        if any(c.size is None for c in self.chunks):
            return None
        return sum(c.size for c in self.chunks)

    @classmethod
    def discover(cls, base_path: str) -> "ChunkManifest":
        """
        Build the manifest of an existing chunk set from disk.

        Matches ``{base_path}.part*.txt``, sorts by name, and checks
        that the indices run 1..n without gaps.

        Args:
            base_path: Path the reassembled file will be written to.

        Returns:
            ChunkManifest with entries in ascending index order.

        Raises:
            NotFound: If no chunk file matches, or an index in the
                run is missing.
        """
        base_path = str(base_path)
        entries = []

        for path in find_chunk_files(base_path):
            index = parse_index(path, base_path)
            if index is None or index < 1:
                logger.warning("Skipping %s: not a chunk file name", path)
                continue
            entries.append(ChunkEntry(index=index, path=path))

        if not entries:
            raise NotFound(
                "join",
                base_path,
                f"no chunk files match {discovery_pattern(base_path)}",
            )

        for expected, entry in enumerate(entries, start=1):
            if entry.index != expected:
                raise NotFound(
                    "join",
                    base_path,
                    f"missing chunk file {chunk_path(base_path, expected)}",
                )

        logger.debug(
            "Discovered %d chunk files for %s", len(entries), base_path,
        )
        return cls(base_path=base_path, chunks=entries)


class JoinResult(BaseModel):
    """Outcome of a successful join."""

    output_path: str
    chunk_count: int
    bytes_written: int
    cleanup_failures: List[str] = Field(default_factory=list)
