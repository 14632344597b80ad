"""Reconciliation of the index against the source tree.

One sync pass scans the project, narrows the scan to a candidate set,
hashes the candidates, updates their entries and drops entries whose
source no longer exists. All mutation happens in memory; the index is
persisted once at the end of the pass.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from codectx.config import ScanConfig
from codectx.errors import FileSystemError
from codectx.paths import artifact_path_for, resolve_in_root

from .changeset import ChangeSet, ChangeSetResolver
from .hashing import hash_file
from .scanner import classify, scan_project
from .store import save_index
from .types import FileEntry, FileStatus, Index

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one sync pass.

    Attributes:
        scanned: Number of files found by the scan
        change_set: Candidate set chosen by the resolver
        modified: Paths whose content hash changed (now stale)
        added: Paths seen for the first time (now missing)
        deleted: Paths whose entries were removed
    """
    scanned: int = 0
    change_set: ChangeSet = field(default_factory=ChangeSet)
    modified: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.modified or self.added or self.deleted)


def stat_and_hash(root: Path, rel_path: str) -> Optional[Tuple[os.stat_result, str]]:
    """Stat and hash a source file.

    Returns:
        (stat result, content hash), or None if the file vanished

    Raises:
        FileSystemError: If the file exists but cannot be read
    """
    full_path = resolve_in_root(root, rel_path)
    try:
        stat = full_path.stat()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise FileSystemError(f"Cannot stat {rel_path}: {e}") from e
    return stat, hash_file(full_path)


def modified_time(stat: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)


def new_entry(rel_path: str, content_hash: str, stat: os.stat_result) -> FileEntry:
    """Entry for a source file seen for the first time: no artifact yet."""
    return FileEntry(
        path=rel_path,
        hash=content_hash,
        artifact_path=artifact_path_for(rel_path),
        last_modified=modified_time(stat),
        status=FileStatus.MISSING,
        type=classify(rel_path),
        size=stat.st_size,
    )


class SyncEngine:
    """Runs sync passes for one project root."""

    def __init__(
        self,
        root: Path,
        config: ScanConfig,
        index_path: Path,
        resolver: Optional[ChangeSetResolver] = None,
    ):
        self.root = Path(root)
        self.config = config
        self.index_path = Path(index_path)
        self.resolver = resolver if resolver is not None else ChangeSetResolver(self.root)

    def run(self, index: Index, full: bool = False, now: Optional[datetime] = None) -> SyncResult:
        """Reconcile the index with the source tree and persist it.

        Args:
            index: Index to update in place
            full: Re-hash every scanned file instead of the narrowed set
            now: Timestamp recorded as the new last sync (default: current UTC time)

        Returns:
            SyncResult with the paths modified, added and deleted

        Raises:
            FileSystemError: If a candidate cannot be read or the index cannot be written
        """
        files = scan_project(self.root, self.config)
        current = set(files)
        change_set = self.resolver.resolve(files, index.last_sync, full=full)
        logger.info(
            f"Sync: {len(files)} files scanned, {len(change_set.paths)} candidates ({change_set.strategy.value})"
        )

        result = SyncResult(scanned=len(files), change_set=change_set)

        for path in change_set.paths:
            if path not in current:
                continue

            observed = stat_and_hash(self.root, path)
            if observed is None:
                continue
            stat, content_hash = observed

            entry = index.files.get(path)
            if entry is None:
                index.upsert(path, new_entry(path, content_hash, stat))
                result.added.append(path)
                logger.debug(f"Added {path}")
                continue

            if entry.hash != content_hash:
                entry.hash = content_hash
                entry.status = FileStatus.STALE
                result.modified.append(path)
                logger.debug(f"Modified {path} (marked stale)")

            entry.path = path
            entry.last_modified = modified_time(stat)
            entry.size = stat.st_size
            entry.type = classify(path)
            if not entry.artifact_path:
                entry.artifact_path = artifact_path_for(path)

        for path in sorted(index.files):
            if path not in current:
                index.remove(path)
                result.deleted.append(path)
                logger.debug(f"Deleted {path}")

        index.last_sync = now if now is not None else datetime.now(timezone.utc)
        save_index(index, self.index_path)

        logger.info(
            f"Sync complete: {len(result.modified)} modified, {len(result.added)} added, "
            f"{len(result.deleted)} deleted"
        )
        return result
