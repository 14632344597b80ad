"""
Change set resolution for incremental sync.

Decides which scanned files a sync pass must re-hash. The resolver never
hashes anything itself, and every fallback widens the candidate set:

1. Full rescan requested -> all files.
2. Inside a git working tree with a previous sync -> files modified since
   the last commit plus untracked-but-not-ignored files. A failed diff or
   an empty union means all files.
3. Otherwise -> files whose mtime is after the previous sync. A failed
   query or an empty result means all files.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

from codectx.errors import NotARepositoryError, VcsError
from codectx.paths import resolve_in_root

from .git_operations import GitWorkingTree

logger = logging.getLogger(__name__)


class ChangeStrategy(str, Enum):
    """How a candidate set was obtained."""
    FULL = "full"
    GIT = "git"
    MTIME = "mtime"
    FALLBACK = "fallback"


@dataclass
class ChangeSet:
    """Candidate paths for one sync pass.

    Attributes:
        paths: Sorted candidate paths (a subset of the scanned files)
        strategy: Which rule produced the set
        reason: Why a fallback was taken (empty otherwise)
    """
    paths: List[str] = field(default_factory=list)
    strategy: ChangeStrategy = ChangeStrategy.FULL
    reason: str = ""


class ChangeSetResolver:
    """Narrows the scanned file list to the files that may have changed."""

    def __init__(self, root: Path, vcs: Optional[GitWorkingTree] = None):
        self.root = Path(root)
        self.vcs = vcs if vcs is not None else GitWorkingTree(self.root)

    def resolve(
        self,
        files: List[str],
        last_sync: Optional[datetime],
        full: bool = False,
    ) -> ChangeSet:
        """Select the candidate set for this pass.

        Args:
            files: All scanned files (normalized relative paths)
            last_sync: Time of the previous sync, or None if there was none
            full: Force a full rescan

        Returns:
            ChangeSet with the candidate paths and the strategy used
        """
        all_files = sorted(files)

        if full:
            return ChangeSet(all_files, ChangeStrategy.FULL)

        if last_sync is not None and self.vcs.is_inside_repository():
            change_set = self._from_git(all_files)
            if change_set is not None:
                return change_set

        return self._from_mtime(all_files, last_sync)

    def _from_git(self, all_files: List[str]) -> Optional[ChangeSet]:
        """Union of modified and untracked files, or None to try mtime instead."""
        try:
            modified = self.vcs.modified_since_last_commit()
        except NotARepositoryError:
            return None
        except VcsError as e:
            logger.warning(f"git diff unavailable, rescanning all files: {e}")
            return ChangeSet(all_files, ChangeStrategy.FALLBACK, reason=str(e))

        try:
            untracked = self.vcs.untracked_files()
        except NotARepositoryError:
            return None
        except VcsError as e:
            logger.warning(f"git untracked listing failed, rescanning all files: {e}")
            return ChangeSet(all_files, ChangeStrategy.FALLBACK, reason=str(e))

        changed: Set[str] = set(modified) | set(untracked)
        candidates = [path for path in all_files if path in changed]
        if not changed:
            logger.info("git reports no changes; rescanning all files")
            return ChangeSet(all_files, ChangeStrategy.FALLBACK, reason="git reported no changes")

        logger.info(f"git narrowed change set to {len(candidates)} of {len(all_files)} files")
        return ChangeSet(candidates, ChangeStrategy.GIT)

    def _from_mtime(self, all_files: List[str], last_sync: Optional[datetime]) -> ChangeSet:
        """Files modified after last_sync; all files when that yields nothing."""
        if last_sync is None:
            return ChangeSet(all_files, ChangeStrategy.FALLBACK, reason="no previous sync")

        threshold = last_sync.timestamp() if last_sync.tzinfo else last_sync.replace(tzinfo=timezone.utc).timestamp()
        candidates = []
        try:
            for path in all_files:
                if resolve_in_root(self.root, path).stat().st_mtime > threshold:
                    candidates.append(path)
        except OSError as e:
            logger.warning(f"mtime query failed, rescanning all files: {e}")
            return ChangeSet(all_files, ChangeStrategy.FALLBACK, reason=str(e))

        if not candidates:
            return ChangeSet(all_files, ChangeStrategy.FALLBACK, reason="no files modified since last sync")

        logger.info(f"mtime narrowed change set to {len(candidates)} of {len(all_files)} files")
        return ChangeSet(candidates, ChangeStrategy.MTIME)
