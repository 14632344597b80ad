"""
Persistence for the tracking index (index.json).

Statistics are never read from disk: a stored "stats" block is ignored on
load and regenerated from the entries on save. Writes go to a temporary
sibling file that replaces the index in one step, so a crash mid-write
leaves the previous index intact.
"""

import json
import logging
import os
from pathlib import Path

from codectx.config import ScanConfig
from codectx.errors import DataError, FileSystemError

from .types import Index

logger = logging.getLogger(__name__)


def create_empty_index(config: ScanConfig | None = None) -> Index:
    """Create an index with no entries and schema-default versions."""
    config = config if config is not None else ScanConfig()
    return Index(prompt_version=config.skeleton_prompt_version, config=config)


def load_index(index_path: Path) -> Index:
    """Load and validate the persisted index.

    Args:
        index_path: Path to index.json

    Returns:
        Index with absent fields defaulted and stats derived from its entries

    Raises:
        DataError: If the file is missing or its content is malformed
        FileSystemError: If the file exists but cannot be read
    """
    if not index_path.exists():
        raise DataError(f"Index not found: {index_path}. Run 'ctx rebuild --confirm' to restore")

    try:
        with open(index_path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise DataError(f"Malformed index {index_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise DataError(f"Malformed index {index_path}: {e}") from e
    except OSError as e:
        raise FileSystemError(f"Cannot read index {index_path}: {e}") from e

    if not isinstance(payload, dict):
        raise DataError(f"Malformed index {index_path}: expected a JSON object")
    if not isinstance(payload.get("files") or {}, dict):
        raise DataError(f"Malformed index {index_path}: 'files' must be an object")

    try:
        index = Index.from_payload(payload)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise DataError(f"Malformed index {index_path}: {e}") from e

    logger.debug(f"Loaded index with {len(index.files)} entries from {index_path}")
    return index


def save_index(index: Index, index_path: Path):
    """Persist the index with write-and-replace.

    Args:
        index: Index to save (stats are recomputed from its entries)
        index_path: Destination path

    Raises:
        FileSystemError: If the index cannot be written
    """
    payload = index.to_payload()
    tmp = index_path.with_suffix(index_path.suffix + ".tmp")
    try:
        index_path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        tmp.replace(index_path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise FileSystemError(f"Cannot write index {index_path}: {e}") from e

    logger.debug(f"Saved index with {len(index.files)} entries to {index_path}")
