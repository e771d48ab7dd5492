"""Shared pytest fixtures for all tests."""

import os

import pytest


@pytest.fixture
def make_file(tmp_path):
    """
    Factory writing a file with the given bytes.

    Returns:
        Callable (content, name="data.bin") -> str path
    """
    def _make(content: bytes, name: str = "data.bin") -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)

    return _make


@pytest.fixture
def random_bytes():
    """Incompressible sample payload (~10 KB)."""
    return os.urandom(10_000)
