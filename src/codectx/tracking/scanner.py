"""
Source file discovery and classification.

This module handles:
- Recursive discovery with os.walk() and in-place directory pruning
- Exclude patterns in gitignore syntax ('**' spans segments), tested
  against the full relative path and against every path segment
- Case-insensitive extension filtering
- Classification of paths into architectural categories
"""

import logging
import os
import posixpath
from pathlib import Path
from typing import Iterable, List, Tuple

from pathspec import GitIgnoreSpec, PathSpec

from codectx.config import ScanConfig
from codectx.errors import DataError, FileSystemError
from codectx.paths import normalize_relative_path, resolve_in_root

logger = logging.getLogger(__name__)


# Categories in priority order: when a path matches several, the earliest wins.
# A category pattern matches a path with exactly as many segments as the
# pattern has, so "*/dto/*" matches "src/dto/user.ts" but not files nested
# deeper below a dto directory.
FILE_TYPE_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("service", ("*service.ts", "*service.js", "*service.go")),
    ("controller", ("*controller.ts", "*controller.js", "*handler.go")),
    ("repository", ("*repository.ts", "*repo.ts", "*repository.go")),
    ("dto", ("*dto.ts", "*dto.go", "*/dto/*")),
    ("model", ("*model.ts", "*entity.ts", "*model.go")),
    ("util", ("*util.ts", "*utils.ts", "*helper.ts")),
    ("middleware", ("*middleware.ts", "*middleware.go")),
    ("config", ("*config.ts", "*config.go")),
)


def compile_patterns(patterns: Iterable[str]) -> PathSpec:
    """Compile glob patterns into a single matcher.

    Patterns use gitignore syntax: "**" spans segments and a pattern
    without a trailing slash also matches everything below a matching
    directory.

    Raises:
        DataError: If a pattern is not valid gitignore syntax
    """
    patterns = list(patterns)
    try:
        return GitIgnoreSpec.from_lines(patterns)
    except ValueError as e:
        raise DataError(f"Invalid glob pattern in {patterns}: {e}") from e


_CATEGORY_SPECS = [
    (category, [(compile_patterns([glob]), glob.count("/") + 1) for glob in globs])
    for category, globs in FILE_TYPE_PATTERNS
]


def matches_path(spec: PathSpec, rel_path: str) -> bool:
    """Check a relative path against a matcher, whole and segment by segment."""
    if not rel_path:
        return False
    if spec.match_file(rel_path):
        return True
    return any(spec.match_file(segment) for segment in rel_path.split("/") if segment)


def classify(rel_path: str) -> str:
    """Return the category label for a path, or "" if none matches.

    Patterns are matched against both the full path and its basename.

    Example:
        >>> classify("src/users/user.service.ts")
        'service'
        >>> classify("src/dto/user.ts")
        'dto'
    """
    base = posixpath.basename(rel_path)
    for category, specs in _CATEGORY_SPECS:
        for spec, depth in specs:
            if _matches_whole(spec, depth, rel_path) or _matches_whole(spec, depth, base):
                return category
    return ""


def _matches_whole(spec: PathSpec, depth: int, path: str) -> bool:
    return path.count("/") + 1 == depth and spec.match_file(path)


def _has_included_extension(name: str, include_extensions: List[str]) -> bool:
    if not include_extensions:
        return True
    ext = posixpath.splitext(name)[1].lower()
    if not ext:
        return False
    return ext in include_extensions


def scan_files(
    root: Path,
    include_extensions: List[str],
    exclude_patterns: List[str],
) -> List[str]:
    """Discover tracked source files under root.

    Args:
        root: Project root to walk
        include_extensions: Extensions to keep (e.g. ['.py']); empty keeps everything
        exclude_patterns: Wildmatch patterns; a matching directory is pruned

    Returns:
        Sorted list of normalized relative paths (forward slashes)

    Raises:
        FileSystemError: If root is missing or not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise FileSystemError(f"Scan root is not a directory: {root}")

    include = [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in include_extensions]
    exclude_spec = compile_patterns(exclude_patterns)
    root_str = str(root)

    def _raise_walk_error(error: OSError):
        raise FileSystemError(f"Cannot scan {error.filename}: {error.strerror}") from error

    discovered = []
    for current, dirs, files in os.walk(root, onerror=_raise_walk_error):
        if current == root_str:
            rel_root = ""
        else:
            rel_root = os.path.relpath(current, root).replace(os.sep, "/")

        # Prune excluded directories in place so os.walk never descends into them
        kept = []
        for d in dirs:
            dir_rel = f"{rel_root}/{d}" if rel_root else d
            if matches_path(exclude_spec, dir_rel) or exclude_spec.match_file(f"{dir_rel}/"):
                logger.debug(f"Pruned directory {dir_rel}")
                continue
            kept.append(d)
        dirs[:] = kept

        for name in files:
            rel_path = f"{rel_root}/{name}" if rel_root else name
            if matches_path(exclude_spec, rel_path):
                continue
            if not _has_included_extension(name, include):
                continue
            discovered.append(rel_path)

    discovered.sort()
    logger.info(f"Discovered {len(discovered)} files in {root}")
    return discovered


def scan_project(root: Path, config: ScanConfig) -> List[str]:
    """Scan a project using its ScanConfig.

    The config's root_path narrows the walk to a subtree; returned paths
    stay relative to the project root.

    Args:
        root: Project root
        config: ScanConfig with include/exclude rules and root_path

    Returns:
        Sorted list of normalized paths relative to root
    """
    prefix = normalize_relative_path(config.root_path)
    scan_root = resolve_in_root(root, prefix) if prefix else Path(root)
    files = scan_files(scan_root, config.include_extensions, config.exclude_patterns)
    if not prefix:
        return files
    return sorted(f"{prefix}/{path}" for path in files)
