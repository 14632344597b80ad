"""
Git queries used to narrow the change set of a sync pass.

Exposes three read-only questions about the working tree containing a
project root: is it inside a repository, which files differ from the last
commit, and which files are untracked but not ignored. All paths are
returned relative to the project root (which may be a subdirectory of the
repository), in forward-slash form.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

# A missing git executable must not fail the import; queries raise instead
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

import git  # noqa: E402
from git.exc import GitCommandError, GitError, InvalidGitRepositoryError, NoSuchPathError  # noqa: E402

from codectx.errors import NotARepositoryError, VcsError  # noqa: E402

logger = logging.getLogger(__name__)


class GitWorkingTree:
    """Read-only view of the git working tree that contains a project root."""

    DEFAULT_TIMEOUT = 30.0  # seconds

    def __init__(self, root: Path, timeout: Optional[float] = None):
        self.root = Path(root).resolve()
        self.timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self._repo: Optional[git.Repo] = None

    def _open(self) -> git.Repo:
        """Open (once) the repository containing root.

        Raises:
            NotARepositoryError: If root is not inside a git working tree
        """
        if self._repo is None:
            try:
                repo = git.Repo(self.root, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotARepositoryError(f"Not a git repository: {self.root}") from e
            if repo.bare or repo.working_tree_dir is None:
                raise NotARepositoryError(f"Bare repository has no working tree: {self.root}")
            self._repo = repo
        return self._repo

    def is_inside_repository(self) -> bool:
        """Check whether root lies inside a git working tree."""
        try:
            self._open()
            return True
        except NotARepositoryError:
            return False
        except GitError as e:
            logger.debug(f"git unavailable for {self.root}: {e}")
            return False

    def modified_since_last_commit(self) -> List[str]:
        """Files that differ from HEAD (staged or unstaged), as in `git diff --name-only HEAD`.

        Raises:
            NotARepositoryError: If root is not inside a git working tree
            VcsError: If the diff cannot be computed (e.g. no commits yet)
        """
        repo = self._open()
        try:
            output = repo.git.diff("--name-only", "-z", "HEAD", kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise VcsError(f"git diff failed in {self.root}: {e.stderr.strip() if e.stderr else e}") from e
        except GitError as e:
            raise VcsError(f"git diff failed in {self.root}: {e}") from e
        return self._to_root_relative(repo, output)

    def untracked_files(self) -> List[str]:
        """Files present but neither tracked nor ignored, as in `git ls-files --others --exclude-standard`.

        Raises:
            NotARepositoryError: If root is not inside a git working tree
            VcsError: If the listing fails
        """
        repo = self._open()
        try:
            output = repo.git.ls_files("--others", "--exclude-standard", "-z", kill_after_timeout=self.timeout)
        except GitError as e:
            raise VcsError(f"git ls-files failed in {self.root}: {e}") from e
        return self._to_root_relative(repo, output)

    def _to_root_relative(self, repo: git.Repo, output: str) -> List[str]:
        """Convert NUL-separated repository-relative paths to root-relative paths.

        Paths outside root are dropped.
        """
        top = Path(repo.working_tree_dir).resolve()
        paths = []
        for item in output.split("\0"):
            if not item:
                continue
            absolute = top.joinpath(*item.split("/"))
            try:
                relative = absolute.relative_to(self.root)
            except ValueError:
                continue
            paths.append(relative.as_posix())
        return sorted(paths)
