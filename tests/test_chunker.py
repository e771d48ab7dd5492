"""
test_chunker.py — Unit Tests for File Chunking
================================================
"""

import base64
import glob
import os

import pytest

from textsplit.core import chunker, naming
from textsplit.core.chunker import join_chunks, split_file
from textsplit.core.errors import CorruptChunk, InvalidArgument, IOFailure, NotFound


def _chunk_files(base: str) -> list:
    return sorted(glob.glob(glob.escape(base) + ".part*.txt"))


def _decoded(path: str) -> bytes:
    with open(path, "r", encoding="ascii") as f:
        return base64.b64decode(f.read())


class TestSplitFile:
    """Tests for the split_file function."""

    def test_split_small_file(self, make_file):
        """File smaller than chunk size produces one chunk."""
        data = b"Hello, World!"
        src = make_file(data)
        manifest = split_file(src, chunk_size=1024)
        assert manifest.count == 1
        assert _decoded(manifest.paths[0]) == data

    def test_split_exact_multiple(self, make_file):
        """File that is exact multiple of chunk size."""
        src = make_file(b"A" * 100)
        manifest = split_file(src, chunk_size=50)
        assert manifest.count == 2
        assert all(c.size == 50 for c in manifest.chunks)

    def test_split_with_remainder(self, make_file):
        """Scaled-down 45 MB / 20 MB case: 20, 20, 5."""
        src = make_file(b"B" * 45)
        manifest = split_file(src, chunk_size=20)
        assert [c.size for c in manifest.chunks] == [20, 20, 5]
        assert manifest.total_bytes == 45

    def test_exactly_one_chunk_of_max_size(self, make_file):
        """Source of exactly chunk_size bytes gives one full chunk."""
        data = bytes(range(256))
        src = make_file(data)
        manifest = split_file(src, chunk_size=256)
        assert manifest.count == 1
        assert _decoded(manifest.paths[0]) == data

    def test_chunk_file_names(self, make_file):
        """Chunk files are {source}.partNNN.txt, 1-based, 3 digits."""
        src = make_file(b"x" * 30)
        manifest = split_file(src, chunk_size=10)
        assert manifest.paths == [
            f"{src}.part001.txt",
            f"{src}.part002.txt",
            f"{src}.part003.txt",
        ]
        assert [c.index for c in manifest.chunks] == [1, 2, 3]

    def test_chunk_content_is_single_line_base64(self, make_file):
        """Chunk file holds only unwrapped base64 text."""
        data = os.urandom(3000)
        src = make_file(data)
        manifest = split_file(src, chunk_size=3000)
        with open(manifest.paths[0], "rb") as f:
            raw = f.read()
        assert b"\n" not in raw
        assert raw == base64.b64encode(data)

    def test_split_is_deterministic(self, make_file):
        """Same source and chunk size give the same names and content."""
        src = make_file(os.urandom(2500))
        first = split_file(src, chunk_size=1000)
        contents = [open(p, "rb").read() for p in first.paths]

        second = split_file(src, chunk_size=1000)
        assert second.paths == first.paths
        assert [open(p, "rb").read() for p in second.paths] == contents

    def test_split_leaves_source_untouched(self, make_file):
        """The source file is only read."""
        data = b"keep me" * 50
        src = make_file(data)
        split_file(src, chunk_size=64)
        with open(src, "rb") as f:
            assert f.read() == data

    def test_split_empty_file_is_noop(self, make_file):
        """Zero-byte source produces zero chunks and no files."""
        src = make_file(b"")
        manifest = split_file(src, chunk_size=10)
        assert manifest.count == 0
        assert _chunk_files(src) == []

    def test_split_invalid_chunk_size(self, make_file):
        """Zero or negative chunk size should raise InvalidArgument."""
        src = make_file(b"data")
        with pytest.raises(InvalidArgument, match="positive integer"):
            split_file(src, chunk_size=0)
        with pytest.raises(InvalidArgument, match="positive integer"):
            split_file(src, chunk_size=-5)

    def test_split_non_integer_chunk_size(self, make_file):
        """Non-integer chunk sizes are rejected, bools included."""
        src = make_file(b"data")
        with pytest.raises(InvalidArgument):
            split_file(src, chunk_size="10")
        with pytest.raises(InvalidArgument):
            split_file(src, chunk_size=True)

    def test_invalid_argument_is_value_error(self, make_file):
        """InvalidArgument can be caught as ValueError."""
        with pytest.raises(ValueError):
            split_file(make_file(b"data"), chunk_size=0)

    def test_split_missing_source(self, tmp_path):
        """Missing source raises NotFound and creates nothing."""
        src = str(tmp_path / "missing.bin")
        with pytest.raises(NotFound, match="split failed for"):
            split_file(src, chunk_size=10)
        assert os.listdir(tmp_path) == []

    def test_split_directory_is_not_a_source(self, tmp_path):
        """A directory is not a regular file."""
        with pytest.raises(NotFound):
            split_file(str(tmp_path), chunk_size=10)

    def test_split_over_naming_ceiling(self, make_file, tmp_path):
        """More than 999 chunks is rejected before any file is written."""
        src = make_file(b"z" * 1000)
        with pytest.raises(InvalidArgument, match="at most 999"):
            split_file(src, chunk_size=1)
        assert _chunk_files(src) == []

    def test_split_replaces_stale_chunks(self, make_file):
        """A re-split removes higher-index chunks from an earlier split."""
        src = make_file(b"q" * 50)
        split_file(src, chunk_size=10)
        assert len(_chunk_files(src)) == 5

        manifest = split_file(src, chunk_size=25)
        assert manifest.count == 2
        assert _chunk_files(src) == manifest.paths

    def test_split_keeps_lookalike_files(self, make_file, tmp_path):
        """Re-splitting only removes this source's own chunk files."""
        notes = make_file(b"my notes", name="app.part-notes.txt")
        other = make_file(b"o" * 30, name="app.part2.bin")
        other_chunks = split_file(other, chunk_size=10).paths
        src = make_file(b"a" * 20, name="app")
        split_file(src, chunk_size=10)

        manifest = split_file(src, chunk_size=10)

        assert manifest.count == 2
        with open(notes, "rb") as f:
            assert f.read() == b"my notes"
        assert all(os.path.exists(p) for p in other_chunks)

    def test_split_write_failure_keeps_earlier_chunks(self, make_file, monkeypatch):
        """A failed write stops the split and leaves chunks 1..k-1."""
        src = make_file(b"f" * 50)
        real_write = chunker._write_text_atomic

        def failing_write(path, text):
            if path.endswith(".part003.txt"):
                raise OSError(28, "No space left on device")
            real_write(path, text)

        monkeypatch.setattr(chunker, "_write_text_atomic", failing_write)
        with pytest.raises(IOFailure, match="write failed") as exc_info:
            split_file(src, chunk_size=10)

        assert exc_info.value.chunks_written == 2
        assert exc_info.value.path == f"{src}.part003.txt"
        assert _chunk_files(src) == [f"{src}.part001.txt", f"{src}.part002.txt"]

    def test_split_refuses_stale_chunks_without_replace(self, make_file):
        """replace_existing=False fails when chunk files already exist."""
        src = make_file(b"q" * 50)
        split_file(src, chunk_size=10)
        with pytest.raises(InvalidArgument, match="already exist"):
            split_file(src, chunk_size=10, replace_existing=False)

    def test_no_temporary_files_left(self, make_file, tmp_path):
        """Only the source and its chunk files remain after a split."""
        src = make_file(b"t" * 35)
        manifest = split_file(src, chunk_size=10)
        names = sorted(os.listdir(tmp_path))
        assert names == sorted(
            [os.path.basename(src)] + [os.path.basename(p) for p in manifest.paths]
        )


class TestJoinChunks:
    """Tests for the join_chunks function."""

    def test_join_matches_original(self, make_file):
        """Joined file matches original data."""
        original = b"Hello " * 1000
        src = make_file(original)
        split_file(src, chunk_size=256)
        os.remove(src)

        result = join_chunks(src)
        with open(src, "rb") as f:
            assert f.read() == original
        assert result.bytes_written == len(original)
        assert result.chunk_count == 24
        assert result.cleanup_failures == []

    @pytest.mark.parametrize("size", [1, 99, 100, 101, 350, 1000])
    def test_roundtrip_sizes(self, make_file, size):
        """Round-trip around and across chunk boundaries."""
        original = os.urandom(size)
        src = make_file(original)
        split_file(src, chunk_size=100)
        os.remove(src)

        join_chunks(src)
        with open(src, "rb") as f:
            assert f.read() == original

    def test_join_overwrites_existing_output(self, make_file):
        """An existing file at the base path is replaced."""
        original = b"new content" * 20
        src = make_file(original)
        split_file(src, chunk_size=32)
        with open(src, "wb") as f:
            f.write(b"stale")

        join_chunks(src)
        with open(src, "rb") as f:
            assert f.read() == original

    def test_join_removes_chunks(self, make_file):
        """Chunk files are deleted after a successful join."""
        src = make_file(b"c" * 100)
        split_file(src, chunk_size=30)
        join_chunks(src)
        assert _chunk_files(src) == []

    def test_join_twice_raises_not_found(self, make_file):
        """Re-running join after cleanup finds nothing."""
        src = make_file(b"c" * 100)
        split_file(src, chunk_size=30)
        join_chunks(src)
        with pytest.raises(NotFound, match="no chunk files"):
            join_chunks(src)

    def test_join_keep_chunks(self, make_file):
        """cleanup=False leaves the chunk files in place."""
        src = make_file(b"k" * 100)
        manifest = split_file(src, chunk_size=30)
        join_chunks(src, cleanup=False)
        assert _chunk_files(src) == manifest.paths

    def test_join_without_chunks(self, tmp_path):
        """No matching chunk files raises NotFound."""
        with pytest.raises(NotFound, match="join failed for"):
            join_chunks(str(tmp_path / "nothing.bin"))

    def test_join_ignores_listing_order(self, make_file, monkeypatch):
        """Join sorts by name even if the listing comes back reversed."""
        original = os.urandom(500)
        src = make_file(original)
        split_file(src, chunk_size=60)
        os.remove(src)

        real_glob = glob.glob
        monkeypatch.setattr(
            naming.glob, "glob", lambda pattern: sorted(real_glob(pattern), reverse=True)
        )
        join_chunks(src)
        with open(src, "rb") as f:
            assert f.read() == original

    def test_join_tolerates_trailing_newline(self, make_file):
        """A newline appended by text tooling does not break decoding."""
        original = b"newline tolerant" * 10
        src = make_file(original)
        manifest = split_file(src, chunk_size=64)
        with open(manifest.paths[0], "a", encoding="ascii") as f:
            f.write("\r\n")
        os.remove(src)

        join_chunks(src)
        with open(src, "rb") as f:
            assert f.read() == original

    def test_corrupt_chunk_detected(self, make_file):
        """Invalid base64 raises CorruptChunk and touches nothing."""
        src = make_file(b"d" * 90)
        manifest = split_file(src, chunk_size=30)
        os.remove(src)
        bad = manifest.paths[1]
        with open(bad, "w", encoding="ascii") as f:
            f.write("not base64!!")
        before = {p: open(p, "rb").read() for p in manifest.paths}

        with pytest.raises(CorruptChunk) as exc_info:
            join_chunks(src)

        assert exc_info.value.index == 2
        assert exc_info.value.path == bad
        assert {p: open(p, "rb").read() for p in manifest.paths} == before
        assert not os.path.exists(src)
        assert not os.path.exists(src + ".partial")

    def test_bad_padding_detected(self, make_file):
        """Truncated base64 (bad padding) is corrupt."""
        src = make_file(b"p" * 10)
        manifest = split_file(src, chunk_size=10)
        with open(manifest.paths[0], "w", encoding="ascii") as f:
            f.write("QQ")
        with pytest.raises(CorruptChunk):
            join_chunks(src)

    def test_empty_chunk_is_corrupt(self, make_file):
        """A chunk file with no content is corrupt."""
        src = make_file(b"e" * 10)
        manifest = split_file(src, chunk_size=10)
        open(manifest.paths[0], "w").close()
        with pytest.raises(CorruptChunk, match="empty"):
            join_chunks(src)

    def test_non_ascii_chunk_is_corrupt(self, make_file):
        """Bytes outside ASCII are corrupt."""
        src = make_file(b"n" * 10)
        manifest = split_file(src, chunk_size=10)
        with open(manifest.paths[0], "wb") as f:
            f.write(b"\xff\xfe")
        with pytest.raises(CorruptChunk):
            join_chunks(src)

    def test_output_failure_discards_partial(self, make_file, monkeypatch):
        """If the output cannot be put in place, chunks stay and no partial remains."""
        src = make_file(b"o" * 90)
        manifest = split_file(src, chunk_size=30)
        os.remove(src)
        real_replace = os.replace

        def failing_replace(src_path, dst_path):
            if dst_path == src:
                raise PermissionError("output locked")
            real_replace(src_path, dst_path)

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(IOFailure, match="cannot write output"):
            join_chunks(src)

        assert not os.path.exists(src)
        assert not os.path.exists(src + ".partial")
        assert _chunk_files(src) == manifest.paths

    def test_missing_middle_chunk(self, make_file):
        """A gap in the index sequence raises NotFound naming it."""
        src = make_file(b"g" * 90)
        manifest = split_file(src, chunk_size=30)
        os.remove(manifest.paths[1])
        with pytest.raises(NotFound, match=r"part002\.txt"):
            join_chunks(src)
        assert os.path.exists(manifest.paths[0])
        assert os.path.exists(manifest.paths[2])

    def test_cleanup_failure_is_warning(self, make_file, monkeypatch, caplog):
        """A chunk that cannot be deleted is reported, not raised."""
        original = b"w" * 90
        src = make_file(original)
        manifest = split_file(src, chunk_size=30)
        os.remove(src)

        real_remove = os.remove

        def flaky_remove(path):
            if path.endswith(".part002.txt"):
                raise PermissionError("locked")
            real_remove(path)

        monkeypatch.setattr(os, "remove", flaky_remove)
        with caplog.at_level("WARNING"):
            result = join_chunks(src)

        assert result.cleanup_failures == [manifest.paths[1]]
        assert "Could not delete chunk file" in caplog.text
        with open(src, "rb") as f:
            assert f.read() == original
        assert _chunk_files(src) == [manifest.paths[1]]
