"""
units.py — Chunk Size Parsing
===============================
Turns user input such as ``20MB``, ``512KiB`` or ``1.5M`` into a byte
count. Decimal suffixes (K, M, G) are powers of 1000, binary ones
(KiB, MiB, GiB) powers of 1024.
"""

import re
from decimal import Decimal

from textsplit.core.errors import InvalidArgument

_UNITS = {
    "": 1,
    "B": 1,
    "K": 1000,
    "KB": 1000,
    "M": 1000 ** 2,
    "MB": 1000 ** 2,
    "G": 1000 ** 3,
    "GB": 1000 ** 3,
    "KIB": 1024,
    "MIB": 1024 ** 2,
    "GIB": 1024 ** 3,
}

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$")


def parse_size(value) -> int:
    """
    Parse a chunk size into a positive number of bytes.

    Args:
        value: An int, or a string with an optional unit suffix.

    Returns:
        The size in bytes.

    Raises:
        InvalidArgument: If the value cannot be parsed or is not positive.
    """
    if isinstance(value, bool):
        raise InvalidArgument("parse chunk size", repr(value), "not a size")

    if isinstance(value, int):
        size = value
    else:
        match = _SIZE_RE.match(str(value))
        if not match or match.group(2).upper() not in _UNITS:
            raise InvalidArgument(
                "parse chunk size", str(value), "unrecognised size format"
            )
        number, unit = match.groups()
        multiplier = _UNITS[unit.upper()]
        if "." in number:
            size = int(Decimal(number) * multiplier)
        else:
            size = int(number) * multiplier

    if size <= 0:
        raise InvalidArgument(
            "parse chunk size", str(value), "chunk size must be a positive integer"
        )
    return size
