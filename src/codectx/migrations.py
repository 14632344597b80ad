"""Migration utilities for the codectx workspace layout.

Handles migration from the legacy <root>/.spine/ workspace to <root>/.ctx/:
- .spine/ is renamed to .ctx/
- .spine/config.json (camelCase JSON) becomes .ctx/config.yaml
- artifact paths recorded under .spine/skeletons/ are rewritten to .ctx/skeletons/
"""

import json
import logging
from pathlib import Path
from typing import Tuple

from .config import ScanConfig, save_config
from .paths import (
    ARTIFACT_DIR_NAME,
    ARTIFACT_ROOT,
    LEGACY_WORKSPACE_DIR_NAME,
    get_config_path,
    get_index_path,
    get_legacy_workspace_dir,
    get_workspace_dir,
)

logger = logging.getLogger(__name__)

LEGACY_CONFIG_FILE_NAME = "config.json"
LEGACY_ARTIFACT_ROOT = f"{LEGACY_WORKSPACE_DIR_NAME}/{ARTIFACT_DIR_NAME}"


def check_needs_migration(root: Path) -> bool:
    """Check if a legacy workspace exists and no current one does.

    Returns:
        True if <root>/.spine/ exists and <root>/.ctx/ does not
    """
    return get_legacy_workspace_dir(root).is_dir() and not get_workspace_dir(root).exists()


def migrate_legacy_workspace(root: Path, verbose: bool = False) -> Tuple[bool, str]:
    """Migrate <root>/.spine/ to <root>/.ctx/.

    Args:
        root: Project root containing the legacy workspace
        verbose: If True, log each migration step

    Returns:
        Tuple of (success, message)
    """
    legacy_dir = get_legacy_workspace_dir(root)
    workspace_dir = get_workspace_dir(root)

    if not legacy_dir.exists():
        return True, "No legacy workspace found"

    try:
        if verbose:
            logger.info(f"Migrating workspace: {legacy_dir} → {workspace_dir}")
        legacy_dir.rename(workspace_dir)

        legacy_config = workspace_dir / LEGACY_CONFIG_FILE_NAME
        if legacy_config.exists():
            _convert_legacy_config(legacy_config, get_config_path(root))
            legacy_config.unlink()
            if verbose:
                logger.info(f"  Converted {LEGACY_CONFIG_FILE_NAME} → {get_config_path(root).name}")

        rewritten = _rewrite_artifact_paths(get_index_path(root))
        if verbose and rewritten:
            logger.info(f"  Rewrote {rewritten} artifact paths")

        return True, f"Migrated {LEGACY_WORKSPACE_DIR_NAME}/ to {workspace_dir.name}/"

    except (OSError, ValueError) as e:
        logger.error(f"Migration failed: {e}")
        return False, f"Migration failed: {e}"


def _convert_legacy_config(legacy_path: Path, config_path: Path):
    """Translate the legacy camelCase JSON config into config.yaml."""
    with open(legacy_path) as f:
        data = json.load(f)

    fields = {}
    if data.get("includedExtensions") is not None:
        fields["include_extensions"] = data["includedExtensions"]
    if data.get("excludedPaths") is not None:
        fields["exclude_patterns"] = data["excludedPaths"]
    if data.get("skeletonPromptVersion"):
        fields["skeleton_prompt_version"] = data["skeletonPromptVersion"]
    if data.get("rootPath"):
        fields["root_path"] = data["rootPath"]

    save_config(ScanConfig(**fields), config_path)


def _rewrite_artifact_paths(index_path: Path) -> int:
    """Point recorded artifact paths at the new artifact root.

    Works on the raw JSON so a legacy index does not have to validate
    against the current schema to be migrated.

    Returns:
        Number of entries rewritten
    """
    if not index_path.exists():
        return 0

    with open(index_path) as f:
        data = json.load(f)

    files = data.get("files") or {}
    rewritten = 0
    for entry in files.values():
        skeleton_path = entry.get("skeletonPath", "")
        if skeleton_path.startswith(LEGACY_ARTIFACT_ROOT + "/"):
            entry["skeletonPath"] = ARTIFACT_ROOT + skeleton_path[len(LEGACY_ARTIFACT_ROOT):]
            rewritten += 1

    if rewritten:
        with open(index_path, "w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")

    return rewritten
