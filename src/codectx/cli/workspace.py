"""CLI commands for workspace lifecycle: 'ctx init', 'ctx rebuild', 'ctx clean'."""

from pathlib import Path

from codectx.cli.core.command_wrapper import command_context
from codectx.cli.logging_config import configure_logging
from codectx.cli.output import print_info, print_json, print_path_list, print_success
from codectx.tracking.workspace import Workspace


def init_command(root: str, output_json: bool, verbose: bool = False, debug: bool = False):
    """Create the .ctx/ workspace (or migrate a legacy one) and index the project.

    Args:
        root: Project root
        output_json: Output JSON format
        verbose: Verbose logging
        debug: Debug logging
    """
    configure_logging(verbose=verbose, debug=debug)

    with command_context("workspace", "init", output_json, root=root) as outcome:
        workspace = Workspace(Path(root))
        result = workspace.initialize()
        outcome["result_count"] = result.files
        outcome["migrated"] = result.migrated

        if output_json:
            print_json("success", result.message, data={
                "root": str(workspace.root),
                "migrated": result.migrated,
                "gitignore_updated": result.gitignore_updated,
                "files": result.files,
            })
            return

        print_success(result.message)
        if result.migrated:
            print_info("Existing index and skeletons kept; run 'ctx sync' to refresh")
            return
        if result.gitignore_updated:
            print_success("Updated .gitignore")
        print_info(f"Found {result.files} files (all marked missing)")
        print("Run 'ctx generate' to request skeletons.")


def rebuild_command(root: str, confirm: bool, output_json: bool, verbose: bool = False, debug: bool = False):
    """Delete every skeleton and re-create the index from a full scan.

    Args:
        root: Project root
        confirm: Required; rebuild is destructive
        output_json: Output JSON format
        verbose: Verbose logging
        debug: Debug logging
    """
    configure_logging(verbose=verbose, debug=debug)

    with command_context("workspace", "rebuild", output_json, root=root) as outcome:
        index, deleted = Workspace(Path(root)).rebuild(confirm=confirm)
        outcome["result_count"] = len(index.files)

        if output_json:
            print_json("success", "Rebuilt index", data={
                "deleted_skeletons": deleted,
                "files": len(index.files),
                "stats": index.stats.to_payload(),
            })
            return

        print_success(f"Deleted {deleted} skeleton file(s)")
        print_success("Reset index")
        print_info(f"Found {len(index.files)} files (all marked missing)")
        print("Run 'ctx generate' to recreate skeletons.")


def clean_command(root: str, output_json: bool, verbose: bool = False, debug: bool = False):
    """Remove skeleton files that no index entry references.

    Args:
        root: Project root
        output_json: Output JSON format
        verbose: List removed paths
        debug: Debug logging
    """
    configure_logging(verbose=verbose, debug=debug)

    with command_context("workspace", "clean", output_json, root=root) as outcome:
        result = Workspace(Path(root)).clean()
        outcome["result_count"] = len(result.removed_files)

        if output_json:
            print_json("success", f"Removed {len(result.removed_files)} orphaned skeleton(s)", data={
                "removed_files": result.removed_files,
                "removed_dirs": result.removed_dirs,
            })
            return

        if not result.removed_files and not result.removed_dirs:
            print("No orphaned skeletons found")
            return

        print_success(
            f"Removed {len(result.removed_files)} orphaned skeleton(s) "
            f"and {len(result.removed_dirs)} empty director(ies)"
        )
        if verbose:
            print_path_list("Removed files", result.removed_files)
            print_path_list("Removed directories", result.removed_dirs)
