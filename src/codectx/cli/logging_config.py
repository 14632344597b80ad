"""Centralized logging configuration for CLI commands.

Provides three logging levels:
- Default: Clean output, only warnings from codectx
- Verbose: Show pass summaries (files scanned, candidates, counts)
- Debug: Show everything including per-file decisions and git internals
"""

import logging


def setup_logging_default():
    """Default logging: Clean output, only warnings and errors.

    Shows:
    - VCS fallbacks and other non-fatal warnings
    - Critical failures
    """
    logging.basicConfig(
        level=logging.WARNING,
        format='%(levelname)s: %(message)s'
    )

    logging.getLogger('codectx').setLevel(logging.WARNING)
    logging.getLogger('git').setLevel(logging.ERROR)


def setup_logging_verbose():
    """Verbose logging: Show user-relevant progress and stats.

    Shows:
    - Scan and candidate-set sizes
    - Sync, validation and clean summaries

    Suppresses:
    - Per-file DEBUG logs
    - GitPython command tracing
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    logging.getLogger('codectx').setLevel(logging.INFO)
    logging.getLogger('git').setLevel(logging.WARNING)


def setup_logging_debug():
    """Debug logging: Show everything.

    Use for:
    - Seeing why a file was (or was not) re-hashed
    - Troubleshooting git change detection
    """
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(name)s - %(levelname)s: %(message)s'
    )

    logging.getLogger('codectx').setLevel(logging.DEBUG)
    logging.getLogger('git').setLevel(logging.DEBUG)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Pick the logging level from the common --verbose/--debug flags."""
    if debug:
        setup_logging_debug()
    elif verbose:
        setup_logging_verbose()
    else:
        setup_logging_default()
