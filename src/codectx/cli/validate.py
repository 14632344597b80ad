"""CLI command for 'ctx validate'."""

from pathlib import Path

from codectx.cli.core.command_wrapper import command_context
from codectx.cli.logging_config import configure_logging
from codectx.cli.output import print_json, print_warning
from codectx.cli.status import format_stats
from codectx.errors import DataError
from codectx.tracking.validate import ValidationResult
from codectx.tracking.workspace import Workspace


def _print_result(result: ValidationResult):
    if result.is_clean:
        print("No issues found.")
    else:
        print("Issues found:")
        for issue in result.issues:
            marker = "[fixed]" if issue.resolved else "[issue]"
            print(f"  {marker} {issue.message}")

    if result.fixed and (result.marked_stale or result.marked_missing or result.marked_current or result.removed):
        print()
        print("Summary:")
        if result.marked_stale:
            print(f"  {result.marked_stale} file(s) marked stale")
        if result.marked_missing:
            print(f"  {result.marked_missing} file(s) marked missing")
        if result.marked_current:
            print(f"  {result.marked_current} file(s) marked current")
        if result.removed:
            print(f"  {result.removed} file(s) removed from index")

    if result.unresolved:
        print_warning(
            f"{len(result.unresolved)} unresolved issue(s). Run 'ctx validate --fix' to repair the index, "
            "then 'ctx generate' for outdated skeletons"
        )


def validate_command(root: str, fix: bool, strict: bool, output_json: bool, debug: bool = False):
    """Audit every index entry against the filesystem.

    Every issue is reported before --strict turns unresolved issues into
    a failure.

    Args:
        root: Project root
        fix: Repair the index in place
        strict: Exit with a data error if unresolved issues remain
        output_json: Output JSON format
        debug: Debug logging
    """
    configure_logging(verbose=False, debug=debug)

    with command_context("validate", "fix" if fix else "check", output_json, root=root, strict=strict) as outcome:
        index, result = Workspace(Path(root)).validate(fix=fix)
        outcome["result_count"] = len(result.issues)
        outcome["unresolved"] = len(result.unresolved)

        if output_json:
            print_json(
                "success" if not (strict and result.unresolved) else "error",
                f"{len(result.issues)} issue(s), {len(result.unresolved)} unresolved",
                data={
                    "issues": [issue.to_dict() for issue in result.issues],
                    "fixed": result.fixed,
                    "saved": result.saved,
                    "stats": index.stats.to_payload(),
                },
            )
        else:
            _print_result(result)
            print(f"Status: {format_stats(index.stats)}")

    # Fail late: after every issue has been printed
    if strict and result.unresolved:
        raise DataError(f"{len(result.unresolved)} unresolved validation issue(s) detected")
