"""Command wrapper utilities for consistent error handling and logging.

This module provides a context manager for CLI command functions that
standardizes:
- Interaction logging
- Error handling with proper exit codes
- Reporting of CtxError by kind (text mode re-raises for main() to map)

Example:
    def sync_command(root: str, full: bool, output_json: bool):
        with command_context("sync", "run", output_json, root=root) as outcome:
            index, result = Workspace(Path(root)).sync(full=full)
            outcome["result_count"] = len(result.modified) + len(result.added)
"""

import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from codectx.errors import CtxError

from ..interaction_logger import interaction_logger
from ..output import print_error


@contextmanager
def command_context(
    namespace: str,
    operation: str,
    output_json: bool = False,
    error_prefix: str = "Failed",
    **log_kwargs
) -> Iterator[Dict[str, Any]]:
    """Context manager for CLI command error handling and logging.

    Args:
        namespace: Logging namespace (e.g., "sync", "validate", "workspace")
        operation: Operation name (e.g., "run", "init", "clean")
        output_json: Whether JSON output mode is enabled
        error_prefix: Prefix for unexpected error messages (default: "Failed")
        **log_kwargs: Additional keyword arguments passed to interaction_logger.start()

    Yields:
        Dict the command fills with fields for the log entry
        ("result_count" plus any extras)

    Raises:
        CtxError: Re-raised in text mode for main() to map to an exit code
        SystemExit: With the error kind's exit code in JSON mode, or 1 on
                    unexpected exceptions
    """
    interaction_logger.start(namespace, operation, **log_kwargs)
    outcome: Dict[str, Any] = {}

    try:
        yield outcome
        interaction_logger.finish(**outcome)

    except CtxError as e:
        interaction_logger.finish(error=str(e), error_kind=e.kind.name.lower())
        if output_json:
            print_error(str(e), output_json)
            sys.exit(e.exit_code)
        raise  # main() prints and maps the exit code

    except Exception as e:
        interaction_logger.finish(error=str(e))
        print_error(f"{error_prefix}: {e}", output_json)
        sys.exit(1)
