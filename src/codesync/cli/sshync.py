#!/usr/bin/env python3
"""Legacy ``sshync`` command: sync one source to one destination."""

import sys
from typing import Tuple

import click

from ..core import CodeSyncError, SyncOptions, SyncTarget
from .main import console, print_failure, run_session, setup_logging

SSHYNC_IGNORE_FILE = ".sshyncignore"

USAGE = (
    "sshync <[blue]source[/blue]> <user@ip\\[:port]:[green]destination[/green]>\n"
    "\t[blue]source[/blue]:\t\tlocal source file/folder\n"
    "\t[green]destination[/green]:\tremote destination file/folder"
)


@click.command()
@click.argument("paths", nargs=-1, metavar="SOURCE DESTINATION")
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def sshync(ctx, paths: Tuple[str, ...], verbose: bool):
    """Auto-sync a file or folder over SSH."""
    if len(paths) != 2:
        console.print(USAGE)
        return
    source, destination = paths

    setup_logging(verbose)
    ctx.ensure_object(dict)["verbose"] = verbose

    try:
        target = SyncTarget.resolve(source, destination)
        run_session(target, SyncOptions(ignore_filename=SSHYNC_IGNORE_FILE))
    except CodeSyncError as e:
        print_failure(e.message, e)
        sys.exit(1)


def main():
    """Main entry point for the sshync CLI."""
    try:
        sshync()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
