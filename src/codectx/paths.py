"""codectx directory and path management.

Project-local workspace (per source tree):
- <root>/.ctx/config.yaml   scan configuration
- <root>/.ctx/index.json    persisted index
- <root>/.ctx/skeletons/    artifact root

User-level state (XDG Base Directory compliant):
- ~/.local/state/codectx/logs/  interaction logs

Legacy workspaces in <root>/.spine/ are migrated by `ctx init`.
"""

import os
import posixpath
from pathlib import Path

WORKSPACE_DIR_NAME = ".ctx"
LEGACY_WORKSPACE_DIR_NAME = ".spine"
CONFIG_FILE_NAME = "config.yaml"
INDEX_FILE_NAME = "index.json"
ARTIFACT_DIR_NAME = "skeletons"
ARTIFACT_INFIX = ".skeleton"

# Artifact root relative to the project root, in slash form.
ARTIFACT_ROOT = f"{WORKSPACE_DIR_NAME}/{ARTIFACT_DIR_NAME}"


def get_workspace_dir(root: Path) -> Path:
    """Get the workspace directory (<root>/.ctx). Not created."""
    return Path(root) / WORKSPACE_DIR_NAME


def get_legacy_workspace_dir(root: Path) -> Path:
    """Get the legacy workspace directory (<root>/.spine).

    Used for migration detection only.
    """
    return Path(root) / LEGACY_WORKSPACE_DIR_NAME


def get_config_path(root: Path) -> Path:
    return get_workspace_dir(root) / CONFIG_FILE_NAME


def get_index_path(root: Path) -> Path:
    return get_workspace_dir(root) / INDEX_FILE_NAME


def get_artifact_root(root: Path) -> Path:
    """Get the artifact root directory (<root>/.ctx/skeletons)."""
    return get_workspace_dir(root) / ARTIFACT_DIR_NAME


def artifact_path_for(source_path: str) -> str:
    """Derive the artifact path for a source path.

    This is the only place artifact paths are computed. The result keeps
    the source's relative location and extension under the artifact root,
    with the skeleton infix inserted before the extension.

    Args:
        source_path: Normalized relative source path (forward slashes)

    Returns:
        Artifact path relative to the project root, in slash form

    Example:
        >>> artifact_path_for("src/app.go")
        '.ctx/skeletons/src/app.skeleton.go'
    """
    normalized = normalize_relative_path(source_path)
    base, ext = posixpath.splitext(normalized)
    return f"{ARTIFACT_ROOT}/{base}{ARTIFACT_INFIX}{ext}"


def normalize_relative_path(path: str) -> str:
    """Normalize a relative path to forward-slash form without leading './'."""
    normalized = posixpath.normpath(str(path).replace("\\", "/"))
    if normalized == ".":
        return ""
    return normalized.removeprefix("./")


def resolve_in_root(root: Path, relative_path: str) -> Path:
    """Turn a slash-form relative path into a filesystem path under root."""
    return Path(root).joinpath(*relative_path.split("/"))


def get_state_dir() -> Path:
    """Get the state directory (XDG-compliant: ~/.local/state/codectx).

    Returns:
        Path to the codectx state directory (may not exist)
    """
    state_home = os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))
    return Path(state_home) / "codectx"


def get_log_dir() -> Path:
    """Get the interaction log directory (~/.local/state/codectx/logs).

    Creates the directory if it doesn't exist.
    """
    log_dir = get_state_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir
