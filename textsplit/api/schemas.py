"""
schemas.py — Pydantic Request/Response Models
=================================================
Data models for the textsplit REST API.
"""

from typing import List, Optional, Union

from pydantic import BaseModel


class SplitRequest(BaseModel):
    """Split (or pack) a file under the work directory."""

    path: str
    chunk_size: Optional[Union[int, str]] = None  # Bytes or e.g. "20MB"
    replace_existing: bool = True


class JoinRequest(BaseModel):
    """Join the chunk files of a base path."""

    path: str
    keep_chunks: bool = False


class UnpackRequest(BaseModel):
    """Rebuild and extract a packed file."""

    path: str
    dest_dir: Optional[str] = None
    keep_archive: bool = False


class SplitResponse(BaseModel):
    """Chunk files created by a split or pack."""

    base_path: str
    chunk_size: int
    chunk_count: int
    chunks: List[str]            # Chunk file paths, in sequence order
    total_bytes: int             # Raw bytes before encoding


class JoinResponse(BaseModel):
    """Outcome of a join."""

    output_path: str
    chunk_count: int
    bytes_written: int
    cleanup_failures: List[str]  # Chunk files that could not be deleted


class UnpackResponse(BaseModel):
    """Files extracted by an unpack."""

    archive_path: str
    extracted: List[str]
    cleanup_failures: List[str]  # Chunk files that could not be deleted


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str
    service: str
    chunk_size: int
    work_dir: str
