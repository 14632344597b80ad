"""Project workspace: the .ctx/ directory and the operations run against it.

A Workspace is bound to one project root, passed in explicitly. Nothing
here reads the process working directory.
"""

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from codectx.config import ScanConfig, default_config, load_config, save_config
from codectx.errors import FileSystemError, UserError
from codectx.migrations import check_needs_migration, migrate_legacy_workspace
from codectx.paths import (
    WORKSPACE_DIR_NAME,
    get_artifact_root,
    get_config_path,
    get_index_path,
    get_workspace_dir,
)

from .clean import CleanResult, clean_artifacts, referenced_artifacts
from .generation import GenerationRequest, request_generation
from .scanner import scan_project
from .store import create_empty_index, load_index, save_index
from .sync import SyncEngine, SyncResult, new_entry, stat_and_hash
from .types import FileStatus, Index
from .validate import ValidationResult, Validator

logger = logging.getLogger(__name__)

GITIGNORE_ENTRY = f"{WORKSPACE_DIR_NAME}/"


@dataclass
class InitResult:
    """What `init` did."""
    migrated: bool = False
    gitignore_updated: bool = False
    files: int = 0
    message: str = ""


def ensure_gitignore_entry(gitignore_path: Path, entry: str) -> bool:
    """Append entry to a .gitignore unless an identical line is present.

    Returns:
        True if the file was created or modified
    """
    if not entry:
        return False
    try:
        existing = gitignore_path.read_text(encoding="utf-8") if gitignore_path.exists() else ""
        if any(line.strip() == entry for line in existing.splitlines()):
            return False
        with open(gitignore_path, "a", encoding="utf-8") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(entry + "\n")
    except OSError as e:
        raise FileSystemError(f"Cannot update {gitignore_path}: {e}") from e
    return True


class Workspace:
    """The codectx workspace of a single project root."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.workspace_dir = get_workspace_dir(self.root)
        self.config_path = get_config_path(self.root)
        self.index_path = get_index_path(self.root)
        self.artifact_root = get_artifact_root(self.root)

    @property
    def is_initialized(self) -> bool:
        return self.workspace_dir.is_dir()

    def require_initialized(self):
        if not self.is_initialized:
            raise UserError(f"Not initialized: {self.root}. Run 'ctx init' first")

    def load_config(self) -> ScanConfig:
        self.require_initialized()
        return load_config(self.config_path)

    def load_index(self) -> Index:
        self.require_initialized()
        return load_index(self.index_path)

    def save_index(self, index: Index):
        save_index(index, self.index_path)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, now: Optional[datetime] = None) -> InitResult:
        """Create the workspace, or migrate a legacy one.

        Raises:
            UserError: If the workspace already exists
            FileSystemError: If the migration or any write fails
        """
        if self.workspace_dir.exists():
            raise UserError("Already initialized. Use 'ctx rebuild --confirm' to reset")

        if check_needs_migration(self.root):
            success, message = migrate_legacy_workspace(self.root, verbose=True)
            if not success:
                raise FileSystemError(message)
            return InitResult(migrated=True, message=message)

        try:
            self.artifact_root.mkdir(parents=True, exist_ok=True)
            config = default_config()
            save_config(config, self.config_path)
        except OSError as e:
            raise FileSystemError(f"Cannot create workspace {self.workspace_dir}: {e}") from e

        gitignore_updated = ensure_gitignore_entry(self.root / ".gitignore", GITIGNORE_ENTRY)
        index = self.build_fresh_index(config, now=now)
        self.save_index(index)

        return InitResult(
            gitignore_updated=gitignore_updated,
            files=len(index.files),
            message=f"Initialized {WORKSPACE_DIR_NAME}/",
        )

    def rebuild(self, confirm: bool = False, now: Optional[datetime] = None) -> Tuple[Index, int]:
        """Delete all artifacts and re-create the index from a full scan.

        Returns:
            (new index, number of artifact files deleted)

        Raises:
            UserError: Without confirm, or if the workspace does not exist
        """
        if not confirm:
            raise UserError("Rebuild requires --confirm flag to proceed")
        self.require_initialized()

        if self.config_path.exists():
            config = load_config(self.config_path)
        else:
            config = default_config()
            save_config(config, self.config_path)

        deleted = self._purge_artifacts()
        index = self.build_fresh_index(config, now=now)
        self.save_index(index)
        logger.info(f"Rebuilt index with {len(index.files)} files; deleted {deleted} artifacts")
        return index, deleted

    def build_fresh_index(self, config: ScanConfig, now: Optional[datetime] = None) -> Index:
        """Index every scanned file with status Missing."""
        index = create_empty_index(config)
        for path in scan_project(self.root, config):
            observed = stat_and_hash(self.root, path)
            if observed is None:
                continue
            stat, content_hash = observed
            index.upsert(path, new_entry(path, content_hash, stat))
        index.last_sync = now if now is not None else datetime.now(timezone.utc)
        return index

    def _purge_artifacts(self) -> int:
        count = 0
        if self.artifact_root.exists():
            count = sum(1 for p in self.artifact_root.rglob("*") if p.is_file())
            try:
                shutil.rmtree(self.artifact_root)
            except OSError as e:
                raise FileSystemError(f"Cannot remove {self.artifact_root}: {e}") from e
        self.artifact_root.mkdir(parents=True, exist_ok=True)
        return count

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def sync(self, full: bool = False, now: Optional[datetime] = None) -> Tuple[Index, SyncResult]:
        config = self.load_config()
        index = self.load_index()
        engine = SyncEngine(self.root, config, self.index_path)
        result = engine.run(index, full=full, now=now)
        return index, result

    def validate(self, fix: bool = False) -> Tuple[Index, ValidationResult]:
        index = self.load_index()
        result = Validator(self.root, self.index_path).run(index, fix=fix)
        return index, result

    def clean(self) -> CleanResult:
        index = self.load_index()
        return clean_artifacts(self.root, self.artifact_root, referenced_artifacts(index))

    def request_generation(
        self,
        statuses: Optional[Set[FileStatus]] = None,
        files: Optional[Iterable[str]] = None,
    ) -> Tuple[Index, List[GenerationRequest]]:
        index = self.load_index()
        worklist = request_generation(index, statuses, files)
        self.save_index(index)
        return index, worklist
