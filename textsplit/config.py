"""
config.py — textsplit Configuration
=====================================
Loads settings from environment variables with sensible defaults.
"""

import os


class Settings:
    """Split/join configuration loaded from environment."""

    HOST: str = os.getenv("TEXTSPLIT_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("TEXTSPLIT_PORT", "8600"))
    CHUNK_SIZE: int = int(os.getenv("TEXTSPLIT_CHUNK_SIZE", "20000000"))  # 20 MB
    WORK_DIR: str = os.getenv("TEXTSPLIT_WORK_DIR", ".")
    LOG_LEVEL: str = os.getenv("TEXTSPLIT_LOG_LEVEL", "INFO").upper()


settings = Settings()
