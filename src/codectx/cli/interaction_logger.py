"""ctx CLI interaction logging.

Logs every ctx command invocation to ~/.local/state/codectx/logs/ for:
- Auditing how often workspaces are synced, validated and cleaned
- Spotting slow passes (duration per command)
- Correlating fallbacks and failures with the project they happened in
"""

import json
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from codectx.paths import get_log_dir


class InteractionLogger:
    """Logs ctx CLI interactions as JSON lines, one file per UTC day.

    The project is identified by the root the command ran against
    (its folder name), passed in by the command.

    Can be disabled by setting CTX_INTERACTION_LOG=0 environment variable.
    """

    LOG_FILENAME_TEMPLATE = "ctx-interactions-{date}.log"

    def __init__(self):
        self._disabled = os.environ.get("CTX_INTERACTION_LOG", "1") == "0"
        self._start_time: Optional[float] = None
        self._context: dict[str, Any] = {}

    def start(self, command: str, subcommand: Optional[str] = None, **kwargs):
        """Start tracking an interaction.

        Args:
            command: The main command (e.g., 'sync', 'validate', 'workspace')
            subcommand: The operation (e.g., 'run', 'fix', 'init')
            **kwargs: Additional context to log (root, flags, filters)
        """
        self._start_time = time.perf_counter()
        self._context = {
            "command": command,
            "subcommand": subcommand,
            **kwargs
        }

    def finish(
        self,
        result_count: Optional[int] = None,
        error: Optional[str] = None,
        **extra
    ):
        """Complete and write the interaction log entry.

        Args:
            result_count: Number of files affected by the command
            error: Error message if command failed, None on success
            **extra: Additional fields to include in log entry
        """
        if self._start_time is None:
            return

        duration_ms = int((time.perf_counter() - self._start_time) * 1000)
        root = self._context.get("root")

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "project": Path(root).resolve().name if root else Path.cwd().name,
            "duration_ms": duration_ms,
            "cwd": str(Path.cwd()),
            "error": error,
            **self._context,
            **extra,
        }

        if result_count is not None:
            entry["result_count"] = result_count

        self._write_entry(entry)
        self._reset()

    def _get_log_filename(self) -> str:
        """Get date-based log filename (UTC)."""
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return self.LOG_FILENAME_TEMPLATE.format(date=today)

    def _write_entry(self, entry: dict[str, Any]):
        """Append entry to log file."""
        if self._disabled:
            return
        try:
            log_file = get_log_dir() / self._get_log_filename()
            with open(log_file, "a") as f:
                f.write(json.dumps(entry, default=str) + "\n")
        except OSError:
            # Logging must never break the CLI
            pass

    def _reset(self):
        """Reset internal state."""
        self._start_time = None
        self._context = {}


# Global logger instance
interaction_logger = InteractionLogger()
