"""CLI command for 'ctx status'."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from codectx.cli.core.command_wrapper import command_context
from codectx.cli.logging_config import configure_logging
from codectx.cli.output import print_json, print_path_list
from codectx.tracking.types import FileStatus, Index, IndexStats, format_timestamp
from codectx.tracking.workspace import Workspace

_NON_CURRENT = (
    (FileStatus.STALE, "Stale"),
    (FileStatus.MISSING, "Missing"),
    (FileStatus.PENDING_GENERATION, "Pending generation"),
)


def format_stats(stats: IndexStats) -> str:
    return (
        f"{stats.current} current, {stats.stale} stale, {stats.missing} missing, "
        f"{stats.pending_generation} pending generation ({stats.total_files} total)"
    )


def humanize_since(moment: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Describe how long ago a moment was, e.g. '5m ago'."""
    if moment is None:
        return "never"
    now = now or datetime.now(timezone.utc)
    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def status_groups(index: Index) -> dict:
    """Sorted paths of every non-current entry, keyed by status value."""
    return {status.value: index.paths_with_status(status) for status, _ in _NON_CURRENT}


def status_command(root: str, verbose: bool, output_json: bool, debug: bool = False):
    """Show per-status totals for a workspace.

    Args:
        root: Project root
        verbose: List non-current files by status
        output_json: Output JSON format
        debug: Debug logging
    """
    configure_logging(verbose=False, debug=debug)

    with command_context("status", "show", output_json, root=root) as outcome:
        workspace = Workspace(Path(root))
        index = workspace.load_index()
        stats = index.stats
        outcome["result_count"] = stats.total_files

        if output_json:
            data = {
                "root": str(workspace.root),
                "last_sync": format_timestamp(index.last_sync),
                "prompt_version": index.prompt_version,
                "stats": stats.to_payload(),
            }
            if verbose:
                data["files"] = status_groups(index)
            print_json("success", f"{stats.total_files} files tracked", data=data)
            return

        console = Console()
        table = Table(title="Code Context Status")
        table.add_column("Status", style="cyan")
        table.add_column("Files", justify="right")
        table.add_row("Current", f"[green]{stats.current}[/green]")
        table.add_row("Stale", _warn(stats.stale))
        table.add_row("Missing", _warn(stats.missing))
        table.add_row("Pending generation", str(stats.pending_generation))
        table.add_row("Total", str(stats.total_files))
        console.print(table)

        print(f"Last sync: {humanize_since(index.last_sync)}")
        print(f"Prompt version: {index.prompt_version}")

        if verbose:
            groups = status_groups(index)
            for status, label in _NON_CURRENT:
                print_path_list(label, groups[status.value])


def _warn(count: int) -> str:
    return f"[yellow]{count}[/yellow]" if count else f"[green]{count}[/green]"
