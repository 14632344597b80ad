"""Removal of orphaned artifacts.

Deletes files under the artifact root that no index entry references, then
prunes directories left empty, deepest first.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from codectx.errors import FileSystemError
from codectx.paths import artifact_path_for, normalize_relative_path

from .types import Index

logger = logging.getLogger(__name__)


@dataclass
class CleanResult:
    """Paths removed by a clean pass, relative to the project root."""
    removed_files: List[str] = field(default_factory=list)
    removed_dirs: List[str] = field(default_factory=list)


def referenced_artifacts(index: Index) -> set:
    """Artifact paths (relative to the project root) referenced by the index."""
    return {
        normalize_relative_path(entry.artifact_path or artifact_path_for(path))
        for path, entry in index.files.items()
    }


def clean_artifacts(root: Path, artifact_root: Path, referenced: Iterable[str]) -> CleanResult:
    """Delete unreferenced artifact files and the directories they leave empty.

    Args:
        root: Project root that artifact paths are relative to
        artifact_root: Directory holding artifacts (a missing root is a no-op)
        referenced: Artifact paths, relative to root, that must be kept

    Returns:
        CleanResult listing removed files and directories

    Raises:
        FileSystemError: If a file or directory cannot be removed
    """
    root = Path(root)
    artifact_root = Path(artifact_root)
    keep = {normalize_relative_path(p) for p in referenced}
    result = CleanResult()

    if not artifact_root.is_dir():
        logger.debug(f"Artifact root {artifact_root} does not exist; nothing to clean")
        return result

    directories = []
    for current, dirs, files in os.walk(artifact_root):
        current_path = Path(current)
        if current_path != artifact_root:
            directories.append(current_path)
        for name in files:
            file_path = current_path / name
            rel_path = file_path.relative_to(root).as_posix()
            if rel_path in keep:
                continue
            try:
                file_path.unlink()
            except OSError as e:
                raise FileSystemError(f"Cannot remove {rel_path}: {e}") from e
            result.removed_files.append(rel_path)
            logger.debug(f"Removed orphaned artifact {rel_path}")

    # Deepest first so chains of emptied parents collapse
    for directory in sorted(directories, key=lambda d: len(d.parts), reverse=True):
        if any(directory.iterdir()):
            continue
        try:
            directory.rmdir()
        except OSError as e:
            raise FileSystemError(f"Cannot remove directory {directory}: {e}") from e
        result.removed_dirs.append(directory.relative_to(root).as_posix())

    result.removed_files.sort()
    logger.info(
        f"Clean: removed {len(result.removed_files)} files and {len(result.removed_dirs)} directories"
    )
    return result
