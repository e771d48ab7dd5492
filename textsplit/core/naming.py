"""
naming.py — Chunk File Naming Scheme
======================================
Chunk files are named ``{base}.part{NNN}.txt`` where NNN is the 1-based
chunk index zero-padded to exactly three digits.

The joiner orders chunk files by sorting their names, which equals
numeric order only because every index has the same width. Changing
INDEX_WIDTH breaks interoperability with existing chunk sets.
"""

import glob
import os
import re
from typing import List, Optional

from textsplit.core.errors import InvalidArgument


INDEX_WIDTH = 3

# Largest index that fits the fixed-width scheme
MAX_CHUNKS = 10 ** INDEX_WIDTH - 1

CHUNK_PREFIX = ".part"
CHUNK_SUFFIX = ".txt"

_INDEX_RE = re.compile(r"\d{%d}" % INDEX_WIDTH)


def chunk_path(base_path: str, index: int) -> str:
    """
    Build the chunk file path for a given base path and index.

    Args:
        base_path: Source file path (split) or output path (join).
        index: 1-based chunk index.

    Returns:
        ``{base_path}.part{index:03d}.txt``

    Raises:
        InvalidArgument: If index is outside 1..MAX_CHUNKS.
    """
    if not 1 <= index <= MAX_CHUNKS:
        raise InvalidArgument(
            "split",
            base_path,
            f"chunk index {index} outside 1..{MAX_CHUNKS}",
        )
    return f"{base_path}{CHUNK_PREFIX}{index:0{INDEX_WIDTH}d}{CHUNK_SUFFIX}"


def discovery_pattern(base_path: str) -> str:
    """Glob pattern matching every chunk file of a base path."""
    return f"{glob.escape(str(base_path))}{CHUNK_PREFIX}*{CHUNK_SUFFIX}"


def find_chunk_files(base_path: str) -> List[str]:
    """
    List chunk files for a base path, sorted by name ascending.

    The directory listing order is never relied on.
    """
    matches = [
        p for p in glob.glob(discovery_pattern(base_path)) if os.path.isfile(p)
    ]
    return sorted(matches)


def parse_index(path: str, base_path: str) -> Optional[int]:
    """
    Extract the chunk index from a chunk file path.

    Returns:
        The index, or None if the name is not exactly
        ``{base_path}.part`` + three digits + ``.txt``.
    """
    head = f"{base_path}{CHUNK_PREFIX}"
    if not (path.startswith(head) and path.endswith(CHUNK_SUFFIX)):
        return None

    digits = path[len(head): len(path) - len(CHUNK_SUFFIX)]
    if not _INDEX_RE.fullmatch(digits):
        return None
    return int(digits)
