"""
chunker.py — File Chunking Module
==================================
Splits a file into size-bounded base64 text chunk files and joins
them back into the original file.

Chunk files: ``{source}.part001.txt``, ``{source}.part002.txt``, ...
Each holds the base64 text of at most ``chunk_size`` raw bytes.

Default chunk size: 20 MB (20000000 bytes)
"""

import logging
import os

from textsplit.config import settings
from textsplit.core.encoding import TEXT_ENCODING, decode_chunk, encode_chunk
from textsplit.core.errors import CorruptChunk, InvalidArgument, IOFailure, NotFound
from textsplit.core.manifest import ChunkEntry, ChunkManifest, JoinResult
from textsplit.core.naming import MAX_CHUNKS, chunk_path, find_chunk_files, parse_index

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = settings.CHUNK_SIZE

# Suffixes for files that only exist while an operation is running
TMP_SUFFIX = ".tmp"
PARTIAL_SUFFIX = ".partial"


def _write_text_atomic(path: str, text: str) -> None:
    """Write a whole text file so it is either absent or complete."""
    tmp_path = path + TMP_SUFFIX
    try:
        with open(tmp_path, "w", encoding=TEXT_ENCODING, newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def _check_chunk_size(chunk_size, source_path: str) -> None:
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        raise InvalidArgument(
            "split", source_path, f"chunk size must be an integer, got {chunk_size!r}"
        )
    if chunk_size <= 0:
        raise InvalidArgument(
            "split", source_path, "chunk size must be a positive integer"
        )


def _clear_existing(source_path: str, replace_existing: bool) -> None:
    existing = [
        p for p in find_chunk_files(source_path)
        if parse_index(p, source_path) is not None
    ]
    if not existing:
        return
    if not replace_existing:
        raise InvalidArgument(
            "split",
            source_path,
            f"{len(existing)} chunk files from an earlier split already exist",
        )

    for path in existing:
        try:
            os.remove(path)
        except OSError as e:
            raise IOFailure("split", path, f"cannot remove stale chunk file: {e}")
        logger.warning("Removed stale chunk file %s", path)


def split_file(
    source_path: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    replace_existing: bool = True,
) -> ChunkManifest:
    """
    Split a file into base64 text chunk files next to it.

    The source is read sequentially into one reusable buffer, so memory
    use stays at O(chunk_size) whatever the file size. Every chunk but
    the last holds exactly chunk_size raw bytes; the last holds the
    remainder. A zero-byte source produces no chunk files.

    Args:
        source_path: Existing regular file to split.
        chunk_size: Maximum raw bytes per chunk (before encoding).
        replace_existing: Remove chunk files left by an earlier split of
            the same source instead of failing.

    Returns:
        ChunkManifest listing the created chunk files in order.

    Raises:
        InvalidArgument: If chunk_size is not a positive integer, the
            split would need more than MAX_CHUNKS files, or stale chunk
            files exist and replace_existing is False.
        NotFound: If the source does not exist or is not a regular file.
        IOFailure: If reading or writing fails. Chunk files written so
            far are left in place.
    """
    source_path = str(source_path)
    _check_chunk_size(chunk_size, source_path)

    if not os.path.isfile(source_path):
        raise NotFound("split", source_path, "source file does not exist")

    try:
        total_size = os.path.getsize(source_path)
    except OSError as e:
        raise IOFailure("split", source_path, str(e))

    expected = expected_chunk_count(total_size, chunk_size)
    if expected > MAX_CHUNKS:
        raise InvalidArgument(
            "split",
            source_path,
            f"{total_size} bytes at chunk size {chunk_size} needs {expected} "
            f"chunks, naming scheme allows at most {MAX_CHUNKS}",
        )

    try:
        src = open(source_path, "rb")
    except OSError as e:
        raise IOFailure("split", source_path, f"cannot open source: {e}")

    manifest = ChunkManifest(base_path=source_path, chunk_size=chunk_size)

    with src:
        _clear_existing(source_path, replace_existing)
        if total_size == 0:
            logger.info("Source %s is empty, no chunks written", source_path)
            return manifest

        buffer = bytearray(chunk_size)
        view = memoryview(buffer)
        index = 0
        while True:
            try:
                n = src.readinto(buffer)
            except OSError as e:
                raise IOFailure(
                    "split", source_path, f"read failed: {e}", chunks_written=index
                )
            if not n:
                break

            index += 1
            # chunk_path rejects index > MAX_CHUNKS if the source grew after sizing
            path = chunk_path(source_path, index)
            try:
                _write_text_atomic(path, encode_chunk(view[:n]))
            except OSError as e:
                raise IOFailure(
                    "split", path, f"write failed: {e}", chunks_written=index - 1
                )

            manifest.chunks.append(ChunkEntry(index=index, path=path, size=n))
            logger.debug("Chunk %d: %d bytes -> %s", index, n, path)

    logger.info(
        "Split %s (%d bytes) into %d chunks (chunk_size=%d)",
        source_path, total_size, manifest.count, chunk_size,
    )
    return manifest


def join_chunks(base_path: str, cleanup: bool = True) -> JoinResult:
    """
    Reassemble a file from its chunk files.

    Chunk files ``{base_path}.part*.txt`` are sorted by name, decoded
    one at a time and streamed into ``{base_path}.partial``, which is
    moved over base_path only once every chunk has been written.
    On any failure the partial file is removed and no chunk file is
    touched.

    Args:
        base_path: Path of the file to reassemble.
        cleanup: Delete the chunk files after a successful join.

    Returns:
        JoinResult with the byte count and any chunk files that could
        not be deleted.

    Raises:
        NotFound: If no chunk files exist, or one in the sequence is missing.
        CorruptChunk: If a chunk file is not valid base64 or is empty.
        IOFailure: If a chunk cannot be read or the output cannot be written.
    """
    base_path = str(base_path)
    manifest = ChunkManifest.discover(base_path)
    partial_path = base_path + PARTIAL_SUFFIX
    bytes_written = 0

    try:
        with open(partial_path, "wb") as out:
            for entry in manifest.chunks:
                data = _read_chunk(entry)
                out.write(data)
                entry.size = len(data)
                bytes_written += len(data)
                logger.debug("Chunk %d: %d bytes <- %s", entry.index, len(data), entry.path)
        os.replace(partial_path, base_path)
    except OSError as e:
        _discard(partial_path)
        raise IOFailure("join", base_path, f"cannot write output: {e}")
    except Exception:
        _discard(partial_path)
        raise

    logger.info(
        "Joined %d chunks into %s (%d bytes)",
        manifest.count, base_path, bytes_written,
    )

    result = JoinResult(
        output_path=base_path,
        chunk_count=manifest.count,
        bytes_written=bytes_written,
    )
    if cleanup:
        result.cleanup_failures = _remove_chunks(manifest)
    return result


def _read_chunk(entry: ChunkEntry) -> bytes:
    """Read and decode one chunk file."""
    try:
        with open(entry.path, "r", encoding=TEXT_ENCODING) as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise CorruptChunk("join", entry.path, f"non-ASCII content: {e}", index=entry.index)
    except OSError as e:
        raise IOFailure("join", entry.path, f"cannot read chunk: {e}")

    try:
        data = decode_chunk(text)
    except ValueError as e:
        raise CorruptChunk("join", entry.path, str(e), index=entry.index)

    if not data:
        raise CorruptChunk("join", entry.path, "chunk file is empty", index=entry.index)
    return data


def _discard(path: str) -> None:
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as e:
        logger.warning("Could not remove partial output %s: %s", path, e)


def _remove_chunks(manifest: ChunkManifest) -> list:
    """Delete consumed chunk files; failures are warnings, not errors."""
    failures = []
    for path in manifest.paths:
        try:
            os.remove(path)
        except OSError as e:
            logger.warning("Could not delete chunk file %s: %s", path, e)
            failures.append(path)
    if not failures:
        logger.info("Removed %d chunk files for %s", manifest.count, manifest.base_path)
    return failures


def expected_chunk_count(total_size: int, chunk_size: int) -> int:
    """Number of chunk files a split of total_size bytes produces."""
    return -(-total_size // chunk_size)
