"""Tests for content hashing."""

import pytest

from codectx.errors import FileSystemError
from codectx.tracking.hashing import CHUNK_SIZE, hash_bytes, hash_file

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
HELLO_WORLD_SHA256 = "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"


class TestHashBytes:
    """Tests for hash_bytes()."""

    def test_known_digest(self):
        assert hash_bytes(b"hello world") == HELLO_WORLD_SHA256

    def test_empty_input(self):
        assert hash_bytes(b"") == EMPTY_SHA256

    def test_digest_is_lowercase_hex(self):
        digest = hash_bytes(b"\x00\xff")
        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)


class TestHashFile:
    """Tests for hash_file()."""

    def test_matches_hash_bytes(self, tmp_path):
        path = tmp_path / "a.py"
        path.write_bytes(b"hello world")
        assert hash_file(path) == HELLO_WORLD_SHA256

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.ts"
        path.write_bytes(b"")
        assert hash_file(path) == EMPTY_SHA256

    def test_large_file_spanning_chunks(self, tmp_path):
        """Streaming over several chunks gives the same digest as one read."""
        data = b"x" * (CHUNK_SIZE * 2 + 17)
        path = tmp_path / "big.go"
        path.write_bytes(data)
        assert hash_file(path) == hash_bytes(data)

    def test_line_endings_are_not_normalized(self, tmp_path):
        unix = tmp_path / "unix.py"
        windows = tmp_path / "windows.py"
        unix.write_bytes(b"a\nb\n")
        windows.write_bytes(b"a\r\nb\r\n")
        assert hash_file(unix) != hash_file(windows)

    def test_missing_file_raises_filesystem_error(self, tmp_path):
        with pytest.raises(FileSystemError) as exc_info:
            hash_file(tmp_path / "missing.py")
        assert exc_info.value.exit_code == 2
