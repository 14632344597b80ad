"""Main CLI entry point for codectx."""

import sys

import click

from codectx import __version__
from codectx.errors import EXIT_ERROR, EXIT_SUCCESS, CtxError

# Version check
MIN_PYTHON = (3, 12)
if sys.version_info < MIN_PYTHON:
    print(f"[ERROR] Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]}+ required")
    sys.exit(1)

ROOT_HELP = 'Project root (default: current directory)'


@click.group()
@click.version_option(version=__version__)
def cli():
    """codectx: track which code skeletons are current, stale or missing"""
    pass


# Workspace lifecycle
@cli.command('init')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--debug', is_flag=True, help='Debug mode (show git and per-file logs)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def init(root, verbose, debug, output_json):
    """Initialize .ctx/ and index the project"""
    from codectx.cli.workspace import init_command
    init_command(root, output_json, verbose=verbose, debug=debug)


@cli.command('rebuild')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--confirm', is_flag=True, help='Confirm the destructive rebuild')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--debug', is_flag=True, help='Debug mode (show git and per-file logs)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def rebuild(root, confirm, verbose, debug, output_json):
    """Reset the index and delete all skeletons (destructive)"""
    from codectx.cli.workspace import rebuild_command
    rebuild_command(root, confirm, output_json, verbose=verbose, debug=debug)


@cli.command('clean')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--verbose', '-v', is_flag=True, help='List removed paths')
@click.option('--debug', is_flag=True, help='Debug mode (show git and per-file logs)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def clean(root, verbose, debug, output_json):
    """Delete skeletons no longer referenced by the index"""
    from codectx.cli.workspace import clean_command
    clean_command(root, output_json, verbose=verbose, debug=debug)


# Tracking passes
@cli.command('sync')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--full', is_flag=True, help='Force full scan (ignore git diff and timestamps)')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed file changes')
@click.option('--debug', is_flag=True, help='Debug mode (show git and per-file logs)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def sync(root, full, verbose, debug, output_json):
    """Scan the codebase for changes and update the index"""
    from codectx.cli.sync import sync_command
    sync_command(root, full, verbose, output_json, debug=debug)


@cli.command('status')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--verbose', '-v', is_flag=True, help='List stale, missing and pending files')
@click.option('--debug', is_flag=True, help='Debug mode')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def status(root, verbose, debug, output_json):
    """Show index status"""
    from codectx.cli.status import status_command
    status_command(root, verbose, output_json, debug=debug)


@cli.command('validate')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--fix', is_flag=True, help='Repair the index in place')
@click.option('--strict', is_flag=True, help='Fail if unresolved issues remain (after reporting all)')
@click.option('--debug', is_flag=True, help='Debug mode (show git and per-file logs)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def validate(root, fix, strict, debug, output_json):
    """Check every index entry against sources and skeletons"""
    from codectx.cli.validate import validate_command
    validate_command(root, fix, strict, output_json, debug=debug)


# Generation requests
@cli.command('generate')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--filter', 'status_filter', default='stale,missing', help='Comma-separated statuses to include (stale,missing,pending,current)')
@click.option('--files', default=None, help='Comma-separated list of specific files to include')
@click.option('--debug', is_flag=True, help='Debug mode')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def generate(root, status_filter, files, debug, output_json):
    """Mark files pending skeleton generation and list them"""
    from codectx.cli.generate import generate_command
    generate_command(root, status_filter, files, output_json, debug=debug)


@cli.command('pipeline')
@click.option('--root', default='.', type=click.Path(file_okay=False, exists=True), help=ROOT_HELP)
@click.option('--full', is_flag=True, help='Force full scan during sync')
@click.option('--filter', 'status_filter', default='stale,missing', help='Comma-separated statuses to include (stale,missing,pending,current)')
@click.option('--files', default=None, help='Comma-separated list of specific files to include')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed file changes during sync')
@click.option('--debug', is_flag=True, help='Debug mode (show git and per-file logs)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def pipeline(root, full, status_filter, files, verbose, debug, output_json):
    """Run sync and generate in one step"""
    from codectx.cli.sync import pipeline_command
    pipeline_command(root, full, status_filter, files, verbose, output_json, debug=debug)


def main():
    """Main CLI entry point with structured error handling."""
    try:
        cli(standalone_mode=False)
        return EXIT_SUCCESS
    except click.exceptions.Abort:
        print("\n[INFO] Operation cancelled by user", file=sys.stderr)
        return EXIT_ERROR
    except click.ClickException as e:
        # Usage errors, bad parameters
        e.show()
        return e.exit_code
    except KeyboardInterrupt:
        print("\n[INFO] Operation cancelled by user", file=sys.stderr)
        return EXIT_ERROR
    except CtxError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        print(f"[ERROR] Unexpected error: {e}", file=sys.stderr)
        if '--verbose' in sys.argv or '-v' in sys.argv:
            import traceback
            traceback.print_exc()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
