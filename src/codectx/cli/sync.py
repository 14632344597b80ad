"""CLI commands for 'ctx sync' and 'ctx pipeline'."""

from pathlib import Path
from typing import Optional

from codectx.cli.core.command_wrapper import command_context
from codectx.cli.generate import print_worklist
from codectx.cli.logging_config import configure_logging
from codectx.cli.output import print_info, print_json, print_path_list
from codectx.cli.status import format_stats
from codectx.tracking.generation import parse_files_filter, parse_status_filter
from codectx.tracking.sync import SyncResult
from codectx.tracking.types import IndexStats
from codectx.tracking.workspace import Workspace


def sync_result_data(result: SyncResult, stats: IndexStats) -> dict:
    return {
        "scanned": result.scanned,
        "strategy": result.change_set.strategy.value,
        "candidates": len(result.change_set.paths),
        "modified": result.modified,
        "added": result.added,
        "deleted": result.deleted,
        "stats": stats.to_payload(),
    }


def print_sync_result(result: SyncResult, stats: IndexStats, verbose: bool):
    print_info(
        f"Scanned {result.scanned} files, re-hashed {len(result.change_set.paths)} "
        f"({result.change_set.strategy.value})"
    )
    if not result.has_changes:
        print("No changes detected")
    else:
        print("Changes detected:")
        if result.modified:
            print(f"  {len(result.modified)} modified (marked stale)")
        if result.added:
            print(f"  {len(result.added)} new file(s) (marked missing)")
        if result.deleted:
            print(f"  {len(result.deleted)} deleted")

    if verbose:
        print_path_list("Modified", result.modified)
        print_path_list("Added", result.added)
        print_path_list("Deleted", result.deleted)

    print(f"Status: {format_stats(stats)}")


def sync_command(root: str, full: bool, verbose: bool, output_json: bool, debug: bool = False):
    """Scan the project and reconcile the index.

    Args:
        root: Project root
        full: Re-hash every file instead of the git/mtime change set
        verbose: List changed paths
        output_json: Output JSON format
        debug: Debug logging
    """
    configure_logging(verbose=verbose, debug=debug)

    with command_context("sync", "run", output_json, root=root, full=full) as outcome:
        index, result = Workspace(Path(root)).sync(full=full)
        stats = index.stats
        outcome["result_count"] = len(result.modified) + len(result.added) + len(result.deleted)
        outcome["strategy"] = result.change_set.strategy.value

        if output_json:
            print_json("success", "Sync complete", data=sync_result_data(result, stats))
        else:
            print_sync_result(result, stats, verbose)


def pipeline_command(
    root: str,
    full: bool,
    status_filter: Optional[str],
    files: Optional[str],
    verbose: bool,
    output_json: bool,
    debug: bool = False,
):
    """Sync, then mark the selected entries pending generation.

    Args:
        root: Project root
        full: Force a full rescan during sync
        status_filter: Comma-separated statuses to select (default: stale,missing)
        files: Comma-separated paths to restrict the selection to
        verbose: List changed paths
        output_json: Output JSON format
        debug: Debug logging
    """
    configure_logging(verbose=verbose, debug=debug)

    with command_context("pipeline", "run", output_json, root=root, full=full) as outcome:
        statuses = parse_status_filter(status_filter)
        requested = parse_files_filter(files)

        workspace = Workspace(Path(root))
        index, result = workspace.sync(full=full)
        sync_stats = index.stats
        if not output_json:
            print_sync_result(result, sync_stats, verbose)

        index, worklist = workspace.request_generation(statuses, requested)
        outcome["result_count"] = len(worklist)

        if output_json:
            print_json(
                "success",
                f"Marked {len(worklist)} file(s) pending generation",
                data={
                    "sync": sync_result_data(result, sync_stats),
                    "files": [request.to_dict() for request in worklist],
                    "stats": index.stats.to_payload(),
                },
            )
        else:
            print_worklist(worklist)
