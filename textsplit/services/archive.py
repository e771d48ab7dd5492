"""
archive.py — Zip Archive Adapter
==================================
Wraps a file in a deflate-compressed zip before chunking and unwraps
it after joining. The chunker never knows its payload is an archive.

Archive naming: ``{original_path}.zip``
"""

import logging
import os
import zipfile
from typing import List

from textsplit.core.errors import InvalidArgument, IOFailure, NotFound

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


def archive_path_for(file_path: str) -> str:
    """Archive path used for a given original file."""
    return f"{file_path}{ARCHIVE_SUFFIX}"


def compress(file_path: str, overwrite: bool = False) -> str:
    """
    Compress a single file into ``{file_path}.zip``.

    The archive holds one member named after the file's basename.

    Args:
        file_path: Existing regular file.
        overwrite: Replace an existing ``{file_path}.zip`` instead of failing.

    Returns:
        Path of the written archive.

    Raises:
        NotFound: If file_path is not an existing file.
        InvalidArgument: If the archive path already exists and overwrite
            is False.
        IOFailure: If the archive cannot be written.
    """
    file_path = str(file_path)
    if not os.path.isfile(file_path):
        raise NotFound("compress", file_path, "file does not exist")

    archive_path = archive_path_for(file_path)
    if os.path.exists(archive_path) and not overwrite:
        raise InvalidArgument(
            "compress", archive_path, "archive already exists, refusing to overwrite"
        )

    try:
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.write(file_path, arcname=os.path.basename(file_path))
    except OSError as e:
        raise IOFailure("compress", archive_path, str(e))

    logger.info(
        "Compressed %s (%d bytes) -> %s (%d bytes)",
        file_path,
        os.path.getsize(file_path),
        archive_path,
        os.path.getsize(archive_path),
    )
    return archive_path


def decompress(archive_path: str, dest_dir: str) -> List[str]:
    """
    Extract every member of a zip archive into dest_dir.

    Args:
        archive_path: Existing zip archive.
        dest_dir: Target directory; created if missing.

    Returns:
        Paths of the extracted files.

    Raises:
        NotFound: If the archive does not exist.
        InvalidArgument: If a member would land outside dest_dir.
        IOFailure: If the archive is unreadable or extraction fails.
    """
    archive_path = str(archive_path)
    if not os.path.isfile(archive_path):
        raise NotFound("decompress", archive_path, "archive does not exist")

    dest_root = os.path.abspath(dest_dir)
    extracted = []
    try:
        os.makedirs(dest_root, exist_ok=True)
        with zipfile.ZipFile(archive_path) as zf:
            for member in zf.infolist():
                target = os.path.abspath(os.path.join(dest_root, member.filename))
                if os.path.commonpath([dest_root, target]) != dest_root:
                    raise InvalidArgument(
                        "decompress",
                        archive_path,
                        f"member {member.filename!r} escapes {dest_root}",
                    )
            for member in zf.infolist():
                path = zf.extract(member, dest_root)
                if not member.is_dir():
                    extracted.append(path)
    except zipfile.BadZipFile as e:
        raise IOFailure("decompress", archive_path, f"not a valid zip archive: {e}")
    except OSError as e:
        raise IOFailure("decompress", archive_path, str(e))

    logger.info(
        "Decompressed %s -> %s (%d files)", archive_path, dest_root, len(extracted)
    )
    return extracted
