"""
routes.py — textsplit REST API Endpoints
==========================================
Thin HTTP wrapper around the local split/join pipeline. Paths in
requests are resolved against the configured work directory; the
service never moves chunk payloads over the network itself.

Endpoints:
    POST /split    — Split a file into base64 text chunk files
    POST /join     — Reassemble a file from its chunk files
    POST /pack     — Compress a file, then split the archive
    POST /unpack   — Join archive chunks, then extract
    GET  /health   — Service health check
"""

import logging
import os

from fastapi import APIRouter, HTTPException

from textsplit.api.schemas import (
    HealthResponse,
    JoinRequest,
    JoinResponse,
    SplitRequest,
    SplitResponse,
    UnpackRequest,
    UnpackResponse,
)
from textsplit.config import settings
from textsplit.core.chunker import join_chunks, split_file
from textsplit.core.errors import (
    ChunkingError,
    CorruptChunk,
    InvalidArgument,
    IOFailure,
    NotFound,
)
from textsplit.core.manifest import ChunkManifest
from textsplit.core.units import parse_size
from textsplit.services.pipeline import pack, unpack

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_CODES = {
    NotFound: 404,
    InvalidArgument: 400,
    CorruptChunk: 422,
    IOFailure: 500,
}


def _http_error(e: ChunkingError) -> HTTPException:
    """Translate a chunking error into an HTTP error response."""
    status_code = _STATUS_CODES.get(type(e), 500)
    if status_code >= 500:
        logger.error("%s", e)
    else:
        logger.warning("%s", e)
    return HTTPException(status_code=status_code, detail=str(e))


def _resolve(path: str) -> str:
    """Resolve a request path inside the work directory."""
    root = os.path.abspath(settings.WORK_DIR)
    resolved = os.path.abspath(os.path.join(root, path))
    if os.path.commonpath([root, resolved]) != root:
        raise HTTPException(
            status_code=400, detail=f"Path {path!r} is outside the work directory"
        )
    return resolved


def _chunk_size(value) -> int:
    if value is None:
        return settings.CHUNK_SIZE
    return parse_size(value)


def _split_response(manifest: ChunkManifest) -> SplitResponse:
    return SplitResponse(
        base_path=manifest.base_path,
        chunk_size=manifest.chunk_size,
        chunk_count=manifest.count,
        chunks=manifest.paths,
        total_bytes=manifest.total_bytes or 0,
    )


# ── Health ─────────────────────────────────────────────

@router.get("/health", response_model=HealthResponse)
def health():
    """Service health check."""
    return HealthResponse(
        status="healthy",
        service="textsplit",
        chunk_size=settings.CHUNK_SIZE,
        work_dir=os.path.abspath(settings.WORK_DIR),
    )


# ── Split / Join ───────────────────────────────────────

@router.post("/split", response_model=SplitResponse)
def split(request: SplitRequest):
    """
    Split a file into ``{path}.partNNN.txt`` chunk files.

    Chunk size defaults to the configured TEXTSPLIT_CHUNK_SIZE.
    """
    source_path = _resolve(request.path)
    logger.info("Split request: %s", source_path)

    try:
        manifest = split_file(
            source_path,
            _chunk_size(request.chunk_size),
            replace_existing=request.replace_existing,
        )
    except ChunkingError as e:
        raise _http_error(e)

    return _split_response(manifest)


@router.post("/join", response_model=JoinResponse)
def join(request: JoinRequest):
    """
    Reassemble ``{path}`` from ``{path}.part*.txt``.

    Chunk files are deleted afterwards unless keep_chunks is set.
    Deletion failures are listed in cleanup_failures, not raised.
    """
    base_path = _resolve(request.path)
    logger.info("Join request: %s", base_path)

    try:
        result = join_chunks(base_path, cleanup=not request.keep_chunks)
    except ChunkingError as e:
        raise _http_error(e)

    return JoinResponse(**result.model_dump())


# ── Pack / Unpack ──────────────────────────────────────

@router.post("/pack", response_model=SplitResponse)
def pack_file(request: SplitRequest):
    """Compress ``{path}`` to a zip and split it into chunk files."""
    file_path = _resolve(request.path)
    logger.info("Pack request: %s", file_path)

    try:
        manifest = pack(
            file_path,
            _chunk_size(request.chunk_size),
            replace_existing=request.replace_existing,
        )
    except ChunkingError as e:
        raise _http_error(e)

    return _split_response(manifest)


@router.post("/unpack", response_model=UnpackResponse)
def unpack_file(request: UnpackRequest):
    """Join ``{path}.zip`` chunk files and extract the archive."""
    file_path = _resolve(request.path)
    dest_dir = _resolve(request.dest_dir) if request.dest_dir else None
    logger.info("Unpack request: %s", file_path)

    try:
        result = unpack(file_path, dest_dir, keep_archive=request.keep_archive)
    except ChunkingError as e:
        raise _http_error(e)

    return UnpackResponse(**result.model_dump())
