"""Error taxonomy for codectx.

Every failure surfaced to a caller carries an ErrorKind. The CLI maps the
kind to a process exit code; nothing inspects the message text.

Exit Codes:
- 0: Success
- 1: User error (precondition unmet, e.g. workspace not initialized) or unexpected failure
- 2: Filesystem error (unreadable source, failed write)
- 3: Version control error
- 4: Data error (malformed index or config)
"""

from enum import Enum


EXIT_SUCCESS = 0
EXIT_ERROR = 1  # unexpected failures


class ErrorKind(Enum):
    """Category of a codectx failure, with its exit code as the value."""
    USER = 1
    FILESYSTEM = 2
    VCS = 3
    DATA = 4

    @property
    def exit_code(self) -> int:
        return self.value


class CtxError(Exception):
    """Base exception for codectx errors.

    Subclasses pin the kind; the base class accepts one explicitly so that
    wrapped failures can keep the kind of their origin.
    """
    kind = ErrorKind.USER

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def exit_code(self) -> int:
        return self.kind.exit_code


class UserError(CtxError):
    """Precondition the user must fix.

    Examples:
    - Workspace not initialized
    - Unknown status filter
    - File requested for generation is not tracked
    """
    kind = ErrorKind.USER


class FileSystemError(CtxError):
    """Filesystem I/O failure (read, write, stat, delete)."""
    kind = ErrorKind.FILESYSTEM


class VcsError(CtxError):
    """Version control query failed."""
    kind = ErrorKind.VCS


class NotARepositoryError(VcsError):
    """Specific case: the directory is not inside a git working tree."""
    pass


class DataError(CtxError):
    """Persisted state (index or config) is malformed or missing."""
    kind = ErrorKind.DATA
