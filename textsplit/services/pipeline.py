"""
pipeline.py — Pack / Unpack Orchestration
===========================================
Composes the archive adapter with the chunker:

  Pack:   file → compress → {file}.zip → split → {file}.zip.partNNN.txt
  Unpack: {file}.zip.partNNN.txt → join → {file}.zip → decompress → file
"""

import logging
import os
from typing import List, Optional

from pydantic import BaseModel, Field

from textsplit.core.chunker import DEFAULT_CHUNK_SIZE, join_chunks, split_file
from textsplit.core.manifest import ChunkManifest
from textsplit.services.archive import archive_path_for, compress, decompress

logger = logging.getLogger(__name__)


class UnpackResult(BaseModel):
    """Outcome of a successful unpack."""

    archive_path: str
    extracted: List[str]
    cleanup_failures: List[str] = Field(default_factory=list)  # Chunk files left behind


def _remove_archive(archive_path: str) -> None:
    try:
        os.remove(archive_path)
        logger.debug("Removed intermediate archive %s", archive_path)
    except OSError as e:
        logger.warning("Could not remove archive %s: %s", archive_path, e)


def pack(
    file_path: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    keep_archive: bool = False,
    replace_existing: bool = True,
) -> ChunkManifest:
    """
    Compress a file and split the archive into text chunk files.

    Args:
        file_path: File to pack.
        chunk_size: Maximum raw archive bytes per chunk.
        keep_archive: Leave ``{file_path}.zip`` on disk after splitting.
        replace_existing: Passed through to split_file.

    Returns:
        ChunkManifest of the archive's chunk files.
    """
    archive_path = compress(file_path)
    try:
        manifest = split_file(archive_path, chunk_size, replace_existing=replace_existing)
    finally:
        if not keep_archive:
            _remove_archive(archive_path)

    logger.info(
        "Packed %s into %d chunk files", file_path, manifest.count
    )
    return manifest


def unpack(
    file_path: str,
    dest_dir: Optional[str] = None,
    keep_archive: bool = False,
) -> UnpackResult:
    """
    Join the archive chunk files of a packed file and extract it.

    Args:
        file_path: Original path of the packed file; chunk files are
            looked up as ``{file_path}.zip.part*.txt``.
        dest_dir: Extraction directory (default: file_path's directory).
        keep_archive: Leave the rebuilt ``{file_path}.zip`` on disk.

    Returns:
        UnpackResult with the extracted paths and any chunk files that
        could not be deleted.
    """
    file_path = str(file_path)
    archive_path = archive_path_for(file_path)
    if dest_dir is None:
        dest_dir = os.path.dirname(os.path.abspath(file_path))

    joined = join_chunks(archive_path)
    extracted = decompress(archive_path, dest_dir)
    if not keep_archive:
        _remove_archive(archive_path)

    logger.info("Unpacked %s into %s", archive_path, dest_dir)
    return UnpackResult(
        archive_path=archive_path,
        extracted=extracted,
        cleanup_failures=joined.cleanup_failures,
    )
