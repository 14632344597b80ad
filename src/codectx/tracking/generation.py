"""Requests for artifact (re)generation.

Selecting entries for generation moves them to PendingGeneration and
returns a worklist for whoever produces the artifacts. The artifact
content itself is produced outside codectx.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from codectx.errors import UserError
from codectx.paths import artifact_path_for, normalize_relative_path

from .types import FileStatus, Index

logger = logging.getLogger(__name__)

DEFAULT_STATUS_FILTER = frozenset({FileStatus.STALE, FileStatus.MISSING})

_STATUS_NAMES = {
    "stale": FileStatus.STALE,
    "missing": FileStatus.MISSING,
    "pending": FileStatus.PENDING_GENERATION,
    "pendinggeneration": FileStatus.PENDING_GENERATION,
    "current": FileStatus.CURRENT,
}


@dataclass
class GenerationRequest:
    """One file queued for artifact generation."""
    path: str
    previous_status: FileStatus
    type: str
    artifact_path: str

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "previous_status": self.previous_status.value,
            "type": self.type,
            "artifact_path": self.artifact_path,
        }


def parse_status_filter(raw: Optional[str]) -> Set[FileStatus]:
    """Parse a comma-separated status filter.

    Blank input means the default (stale, missing). Names are
    case-insensitive; 'pending' and 'pendingGeneration' are equivalent.

    Raises:
        UserError: On an unknown status name or a filter naming no status
    """
    if raw is None or not raw.strip():
        return set(DEFAULT_STATUS_FILTER)

    statuses = set()
    for part in raw.split(","):
        name = part.strip().lower()
        if not name:
            continue
        if name not in _STATUS_NAMES:
            raise UserError(f"Unknown status filter: {part.strip()}")
        statuses.add(_STATUS_NAMES[name])

    if not statuses:
        raise UserError("No valid statuses provided")
    return statuses


def parse_files_filter(raw: Optional[str]) -> List[str]:
    """Parse a comma-separated list of relative paths into normalized form."""
    if not raw:
        return []
    files = []
    for part in raw.split(","):
        path = normalize_relative_path(part.strip())
        if path and path not in files:
            files.append(path)
    return files


def request_generation(
    index: Index,
    statuses: Optional[Set[FileStatus]] = None,
    files: Optional[Iterable[str]] = None,
) -> List[GenerationRequest]:
    """Mark selected entries PendingGeneration.

    Args:
        index: Index to update in place (the caller persists it)
        statuses: Statuses eligible for selection (default: stale, missing)
        files: Restrict the selection to these paths; each must be tracked
               and have an eligible status

    Returns:
        Worklist sorted by path

    Raises:
        UserError: If a requested file is untracked or ineligible, or if
                   nothing is selected
    """
    statuses = set(statuses) if statuses else set(DEFAULT_STATUS_FILTER)
    requested = list(files or [])

    if requested:
        selected = []
        for path in requested:
            entry = index.files.get(path)
            if entry is None:
                raise UserError(f"File not tracked in index: {path}")
            if entry.status not in statuses:
                raise UserError(f"File {path} does not match filter statuses")
            selected.append(path)
        selected.sort()
    else:
        selected = sorted(p for p, e in index.files.items() if e.status in statuses)

    if not selected:
        raise UserError("No files match the requested filters")

    worklist = []
    for path in selected:
        entry = index.files[path]
        if not entry.artifact_path:
            entry.artifact_path = artifact_path_for(path)
        worklist.append(GenerationRequest(path, entry.status, entry.type, entry.artifact_path))
        entry.status = FileStatus.PENDING_GENERATION

    logger.info(f"Marked {len(worklist)} files pending generation")
    return worklist
