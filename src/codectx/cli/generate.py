"""CLI command for 'ctx generate'."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from codectx.cli.core.command_wrapper import command_context
from codectx.cli.logging_config import configure_logging
from codectx.cli.output import print_json
from codectx.tracking.generation import GenerationRequest, parse_files_filter, parse_status_filter
from codectx.tracking.workspace import Workspace


def print_worklist(worklist: List[GenerationRequest]):
    """Render the generation worklist as a table with next steps."""
    console = Console()
    table = Table(title=f"Pending generation ({len(worklist)})")
    table.add_column("Source", style="cyan")
    table.add_column("Was")
    table.add_column("Type")
    table.add_column("Skeleton path")
    for request in worklist:
        table.add_row(request.path, request.previous_status.value, request.type or "-", request.artifact_path)
    console.print(table)

    print("Next steps:")
    print("  1. Create or update the skeleton files at the paths above")
    print("  2. Run 'ctx validate --fix' to record their hashes and mark them current")


def generate_command(
    root: str,
    status_filter: Optional[str],
    files: Optional[str],
    output_json: bool,
    debug: bool = False,
):
    """Mark entries pending generation and print the worklist.

    Args:
        root: Project root
        status_filter: Comma-separated statuses to select (default: stale,missing)
        files: Comma-separated paths to restrict the selection to
        output_json: Output JSON format
        debug: Debug logging
    """
    configure_logging(verbose=False, debug=debug)

    with command_context("generate", "request", output_json, root=root, filter=status_filter) as outcome:
        statuses = parse_status_filter(status_filter)
        requested = parse_files_filter(files)

        index, worklist = Workspace(Path(root)).request_generation(statuses, requested)
        outcome["result_count"] = len(worklist)

        if output_json:
            print_json(
                "success",
                f"Marked {len(worklist)} file(s) pending generation",
                data={
                    "files": [request.to_dict() for request in worklist],
                    "stats": index.stats.to_payload(),
                },
            )
        else:
            print_worklist(worklist)
