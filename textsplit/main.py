"""
main.py — textsplit Service Entrypoint
========================================
Runs the FastAPI service that exposes split, join, pack and unpack
for files under the configured work directory.
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from textsplit.api.routes import router
from textsplit.config import settings

# ── Logging Configuration ─────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("textsplit")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("textsplit starting on %s:%d", settings.HOST, settings.PORT)
    logger.info("Work dir:    %s", os.path.abspath(settings.WORK_DIR))
    logger.info("Chunk size:  %d bytes", settings.CHUNK_SIZE)
    yield
    logger.info("textsplit shutting down")


# ── FastAPI Application ───────────────────────────────────
app = FastAPI(
    title="textsplit — Text Chunk Split/Join API",
    description=(
        "Split binary files into size-bounded base64 text chunk files "
        "and reassemble them.\n\n"
        "**Pack:** file → zip → split → file.zip.partNNN.txt\n\n"
        "**Unpack:** file.zip.partNNN.txt → join → zip → extract"
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(router)


def run(host: str = settings.HOST, port: int = settings.PORT) -> None:
    """Serve the API with uvicorn."""
    uvicorn.run(app, host=host, port=port)
