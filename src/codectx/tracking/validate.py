"""Exhaustive index validation with optional self-healing.

Unlike sync, validation ignores the change-set heuristic and re-hashes the
source of every entry. Each entry runs through five checks in order:

a. source exists (fix: drop the entry, skip the rest)
b. source hash matches (fix: record new hash, mark stale)
c. artifact exists (fix: mark missing, clear the artifact hash)
d. artifact hash matches (fix: adopt it; a first capture is not an issue)
e. promotion to current (fix only; the only way an entry becomes current)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from codectx.errors import FileSystemError
from codectx.paths import artifact_path_for, resolve_in_root

from .hashing import hash_file
from .store import save_index
from .sync import modified_time, stat_and_hash
from .types import FileStatus, Index

logger = logging.getLogger(__name__)


class IssueKind(str, Enum):
    SOURCE_MISSING = "source missing"
    HASH_MISMATCH = "hash mismatch"
    ARTIFACT_MISSING = "artifact missing"
    ARTIFACT_HASH_MISMATCH = "artifact hash mismatch"


# What fix mode did about each kind of issue
_RESOLUTIONS = {
    IssueKind.SOURCE_MISSING: "removed from index",
    IssueKind.HASH_MISMATCH: "marked stale",
    IssueKind.ARTIFACT_MISSING: "marked missing",
    IssueKind.ARTIFACT_HASH_MISMATCH: "artifact hash updated",
}


@dataclass
class ValidationIssue:
    """A single discrepancy found for one entry."""
    path: str
    kind: IssueKind
    resolved: bool = False

    @property
    def message(self) -> str:
        text = f"{self.path}: {self.kind.value}"
        if self.resolved:
            text += f" ({_RESOLUTIONS[self.kind]})"
        return text

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "kind": self.kind.value,
            "resolved": self.resolved,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Outcome of a validation pass.

    Attributes:
        issues: Every discrepancy found, in path order
        fixed: Whether the pass ran in fix mode
        saved: Whether the index was written back
        marked_stale / marked_missing / marked_current / removed: Fix-mode counters
    """
    issues: List[ValidationIssue] = field(default_factory=list)
    fixed: bool = False
    saved: bool = False
    marked_stale: int = 0
    marked_missing: int = 0
    marked_current: int = 0
    removed: int = 0

    @property
    def unresolved(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if not issue.resolved]

    @property
    def is_clean(self) -> bool:
        return not self.issues


class Validator:
    """Audits (and in fix mode repairs) every entry of an index."""

    def __init__(self, root: Path, index_path: Path):
        self.root = Path(root)
        self.index_path = Path(index_path)

    def run(self, index: Index, fix: bool = False) -> ValidationResult:
        """Validate every entry of the index.

        The index is modified (and saved) only in fix mode, and only if a
        fix actually changed something.

        Raises:
            FileSystemError: If a source or artifact exists but cannot be read
        """
        result = ValidationResult(fixed=fix)
        changed = False

        for path in sorted(index.files):
            entry = index.files[path]

            # a. source existence
            observed = stat_and_hash(self.root, path)
            if observed is None:
                result.issues.append(ValidationIssue(path, IssueKind.SOURCE_MISSING, resolved=fix))
                if fix:
                    index.remove(path)
                    result.removed += 1
                    changed = True
                continue
            stat, source_hash = observed

            # b. source hash
            source_changed = source_hash != entry.hash
            if source_changed:
                result.issues.append(ValidationIssue(path, IssueKind.HASH_MISMATCH, resolved=fix))
                if fix:
                    entry.hash = source_hash
                    entry.size = stat.st_size
                    entry.last_modified = modified_time(stat)
                    entry.status = FileStatus.STALE
                    result.marked_stale += 1
                    changed = True

            artifact_path = entry.artifact_path or artifact_path_for(path)
            if fix and not entry.artifact_path:
                entry.artifact_path = artifact_path
                changed = True
            artifact_file = resolve_in_root(self.root, artifact_path)

            # c. artifact existence
            if not artifact_file.is_file():
                # An entry already recorded as missing with no artifact hash is consistent
                if entry.status != FileStatus.MISSING or entry.artifact_hash:
                    result.issues.append(ValidationIssue(path, IssueKind.ARTIFACT_MISSING, resolved=fix))
                    if fix:
                        entry.status = FileStatus.MISSING
                        entry.artifact_hash = ""
                        result.marked_missing += 1
                        changed = True
                continue

            # d. artifact hash
            try:
                artifact_hash = hash_file(artifact_file)
            except FileSystemError:
                logger.error(f"Cannot hash artifact {artifact_path} for {path}")
                raise

            adopted = False
            if not entry.artifact_hash:
                if fix:
                    entry.artifact_hash = artifact_hash
                    adopted = True
                    changed = True
            elif entry.artifact_hash != artifact_hash:
                result.issues.append(ValidationIssue(path, IssueKind.ARTIFACT_HASH_MISMATCH, resolved=fix))
                if fix:
                    entry.artifact_hash = artifact_hash
                    adopted = True
                    changed = True

            # e. promotion
            if (
                fix
                and not source_changed
                and entry.artifact_hash
                and entry.status != FileStatus.MISSING
                and (entry.status == FileStatus.PENDING_GENERATION or adopted)
                and entry.status != FileStatus.CURRENT
            ):
                entry.status = FileStatus.CURRENT
                result.marked_current += 1
                changed = True

        if fix and changed:
            save_index(index, self.index_path)
            result.saved = True

        logger.info(
            f"Validation: {len(result.issues)} issues ({len(result.unresolved)} unresolved) "
            f"across {len(index.files)} entries"
        )
        return result
