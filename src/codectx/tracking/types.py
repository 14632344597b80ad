"""
Type definitions for the tracking index.

This module defines the persisted data structures: per-file entries with
their four-state lifecycle, the index that holds them, and the statistics
derived from the index.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from codectx.config import DEFAULT_PROMPT_VERSION, INDEX_SCHEMA_VERSION, ScanConfig


class FileStatus(str, Enum):
    """Lifecycle state of a tracked source file's artifact.

    MISSING: no trusted artifact exists (new file, or artifact deleted)
    STALE: source changed since the artifact was last confirmed
    PENDING_GENERATION: flagged for (re)generation by an external request
    CURRENT: artifact confirmed up to date (only the validator sets this)
    """
    CURRENT = "current"
    STALE = "stale"
    MISSING = "missing"
    PENDING_GENERATION = "pendingGeneration"

    def __str__(self) -> str:
        return self.value


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp as UTC ISO-8601 with a 'Z' suffix."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Empty values and the zero time (year 1) mean "never" and yield None.
    Naive timestamps are taken to be UTC.

    Raises:
        ValueError: If the value is not a valid ISO-8601 timestamp
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    if parsed.year <= 1:
        return None
    return parsed


@dataclass
class FileEntry:
    """Index record for a single tracked source file.

    Attributes:
        path: Normalized relative source path (forward slashes), the index key
        hash: SHA-256 hex digest of the source bytes
        artifact_hash: SHA-256 hex digest of the last-confirmed artifact (may be empty)
        artifact_path: Artifact location relative to the project root
        last_modified: Source modification time (UTC)
        status: Lifecycle state
        type: Classified category label (may be empty)
        size: Source size in bytes
    """
    path: str
    hash: str
    artifact_path: str
    last_modified: Optional[datetime] = None
    status: FileStatus = FileStatus.MISSING
    artifact_hash: str = ""
    type: str = ""
    size: int = 0

    def to_payload(self) -> dict:
        """Convert to the persisted JSON representation."""
        return {
            "path": self.path,
            "hash": self.hash,
            "skeletonHash": self.artifact_hash,
            "skeletonPath": self.artifact_path,
            "lastModified": format_timestamp(self.last_modified),
            "status": self.status.value,
            "type": self.type,
            "size": self.size,
        }

    @classmethod
    def from_payload(cls, payload: dict, path: Optional[str] = None) -> "FileEntry":
        """Create from the persisted JSON representation.

        Args:
            payload: Entry mapping as stored in index.json
            path: Map key the entry was stored under, used when the entry
                  itself carries no path
        """
        return cls(
            path=payload.get("path") or path or "",
            hash=payload.get("hash", ""),
            artifact_hash=payload.get("skeletonHash", "") or "",
            artifact_path=payload.get("skeletonPath", "") or "",
            last_modified=parse_timestamp(payload.get("lastModified")),
            status=FileStatus(payload.get("status") or FileStatus.MISSING.value),
            type=payload.get("type", "") or "",
            size=int(payload.get("size", 0) or 0),
        )


@dataclass(frozen=True)
class IndexStats:
    """Per-status counts, always derived from an index's entries."""
    total_files: int = 0
    current: int = 0
    stale: int = 0
    missing: int = 0
    pending_generation: int = 0

    def to_payload(self) -> dict:
        return {
            "totalFiles": self.total_files,
            "current": self.current,
            "stale": self.stale,
            "missing": self.missing,
            "pendingGeneration": self.pending_generation,
        }


def calculate_stats(files: Dict[str, FileEntry]) -> IndexStats:
    """Project entry statuses into counts. Pure, O(n) over the entries."""
    counts = {status: 0 for status in FileStatus}
    for entry in files.values():
        counts[entry.status] += 1
    return IndexStats(
        total_files=len(files),
        current=counts[FileStatus.CURRENT],
        stale=counts[FileStatus.STALE],
        missing=counts[FileStatus.MISSING],
        pending_generation=counts[FileStatus.PENDING_GENERATION],
    )


@dataclass
class Index:
    """The persisted map from source path to FileEntry.

    Statistics are not stored on the object: `stats` is recomputed from
    `files` every time it is read, so it cannot drift from the entries.

    Attributes:
        version: Index schema version
        prompt_version: Skeleton prompt version the artifacts were built for
        last_sync: Time of the last completed sync pass (None if never)
        config: Scan configuration in effect when the index was written
        files: Entries keyed by normalized relative path
    """
    version: str = INDEX_SCHEMA_VERSION
    prompt_version: str = DEFAULT_PROMPT_VERSION
    last_sync: Optional[datetime] = None
    config: ScanConfig = field(default_factory=ScanConfig)
    files: Dict[str, FileEntry] = field(default_factory=dict)

    @property
    def stats(self) -> IndexStats:
        return calculate_stats(self.files)

    def upsert(self, path: str, entry: FileEntry):
        self.files[path] = entry

    def remove(self, path: str):
        self.files.pop(path, None)

    def paths_with_status(self, status: FileStatus) -> list:
        """Sorted paths of entries in the given state."""
        return sorted(p for p, e in self.files.items() if e.status == status)

    def to_payload(self) -> dict:
        """Convert to the persisted JSON representation (entries sorted by path)."""
        return {
            "version": self.version,
            "promptVersion": self.prompt_version,
            "lastSync": format_timestamp(self.last_sync),
            "config": {
                "includedExtensions": list(self.config.include_extensions),
                "excludedPaths": list(self.config.exclude_patterns),
                "skeletonPromptVersion": self.config.skeleton_prompt_version,
                "rootPath": self.config.root_path,
            },
            "files": {
                path: self.files[path].to_payload() for path in sorted(self.files)
            },
            "stats": self.stats.to_payload(),
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "Index":
        """Create from the persisted JSON representation.

        Absent fields fall back to schema defaults. Any stored "stats"
        block is ignored.
        """
        raw_config = payload.get("config") or {}
        config_fields = {}
        if raw_config.get("includedExtensions") is not None:
            config_fields["include_extensions"] = raw_config["includedExtensions"]
        if raw_config.get("excludedPaths") is not None:
            config_fields["exclude_patterns"] = raw_config["excludedPaths"]
        if raw_config.get("skeletonPromptVersion"):
            config_fields["skeleton_prompt_version"] = raw_config["skeletonPromptVersion"]
        if raw_config.get("rootPath"):
            config_fields["root_path"] = raw_config["rootPath"]

        raw_files = payload.get("files") or {}
        files = {}
        for key, raw_entry in raw_files.items():
            entry = FileEntry.from_payload(raw_entry, path=key)
            files[entry.path] = entry

        return cls(
            version=payload.get("version") or INDEX_SCHEMA_VERSION,
            prompt_version=payload.get("promptVersion") or DEFAULT_PROMPT_VERSION,
            last_sync=parse_timestamp(payload.get("lastSync")),
            config=ScanConfig(**config_fields),
            files=files,
        )
