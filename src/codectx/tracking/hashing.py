"""Content hashing for change detection.

SHA-256 over raw bytes, hex-encoded. Files are streamed in binary mode so
text and binary sources hash identically to their on-disk bytes.
"""

import hashlib
from pathlib import Path

from codectx.errors import FileSystemError

CHUNK_SIZE = 262144  # 256KB


def hash_bytes(data: bytes) -> str:
    """Compute the SHA-256 hex digest of a byte string.

    Example:
        >>> hash_bytes(b"hello world")
        'b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9'
    """
    return hashlib.sha256(data).hexdigest()


def hash_file(file_path: Path) -> str:
    """Compute the SHA-256 hex digest of a file's content with streaming.

    Args:
        file_path: Path to file

    Returns:
        64-character hex digest

    Raises:
        FileSystemError: If the file cannot be opened or read
    """
    hasher = hashlib.sha256()
    try:
        with open(file_path, 'rb') as f:
            while chunk := f.read(CHUNK_SIZE):
                hasher.update(chunk)
    except OSError as e:
        raise FileSystemError(f"Cannot hash {file_path}: {e}") from e
    return hasher.hexdigest()
