"""
encoding.py — Text-Safe Chunk Codec
=====================================
Converts raw chunk bytes to a single line of standard base64 text
and back. Chunk files hold nothing but this text, written as ASCII.
"""

import base64
import binascii
import logging

logger = logging.getLogger(__name__)

# Chunk files are plain single-byte text, no BOM
TEXT_ENCODING = "ascii"


def encode_chunk(data) -> str:
    """
    Encode a chunk payload as base64 text.

    Args:
        data: Raw bytes (or any bytes-like object, e.g. a memoryview
            over the writer's reusable buffer).

    Returns:
        Standard-alphabet base64 string with '=' padding and no
        line breaks.
    """
    text = base64.b64encode(data).decode(TEXT_ENCODING)
    logger.debug("Encoded %d bytes -> %d chars", len(data), len(text))
    return text


def decode_chunk(text: str) -> bytes:
    """
    Decode base64 chunk text back to raw bytes.

    Surrounding whitespace (e.g. a trailing newline added by an editor
    or a text-only channel) is ignored; anything else outside the
    base64 alphabet, or bad padding, is rejected.

    Args:
        text: Full content of a chunk file.

    Returns:
        The decoded payload.

    Raises:
        ValueError: If the text is not valid base64.
    """
    try:
        data = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 content: {e}") from e

    logger.debug("Decoded %d chars -> %d bytes", len(text), len(data))
    return data
