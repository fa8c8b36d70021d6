"""
Main CLI entry point for codesync.

This module provides the ``codesync`` command: start syncing a source to a
destination immediately, save those settings to a file, or load them
back and start syncing.
"""

import logging
import os
import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape

from ..__version__ import get_version
from ..core import (
    CodeSyncError,
    ConfigManager,
    ConfigurationError,
    SyncOptions,
    SyncSession,
    SyncTarget,
)

console = Console()

VERSION_FLAGS = ("--version", "-v")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def parse_ignore_folders(ctx, param, value: Optional[str]) -> List[str]:
    """Split a comma-separated folder list, dropping blank entries."""
    if not value:
        return []
    return [folder.strip() for folder in value.split(",") if folder.strip()]


def print_settings(source: str, destination: str, ignore_folders: List[str], source_note: str = ""):
    """Print a settings record below a status line."""
    console.print(f"[blue]  Source: {escape(source)}{escape(source_note)}[/blue]")
    console.print(f"[blue]  Destination: {escape(destination)}[/blue]")
    if ignore_folders:
        console.print(f"[blue]  Ignore folders: {escape(', '.join(ignore_folders))}[/blue]")


def print_failure(message: str, error: CodeSyncError):
    """Print a red status line, plus the structured error when verbose."""
    console.print(f"[red]✗ {escape(message)}[/red]")

    ctx = click.get_current_context(silent=True)
    if ctx is not None and ctx.obj and ctx.obj.get("verbose"):
        console.print("[red]Details:[/red]")
        console.print_json(data=error.to_dict())


def print_help(ctx):
    """Print the top-level help; a wrong argument count is not an error."""
    console.print(ctx.find_root().get_help(), markup=False, highlight=False)


def run_session(target: SyncTarget, options: SyncOptions):
    """Start a sync session and keep it running until the process exits."""
    session = SyncSession(target, options=options, console=console)
    session.start()
    session.serve_forever()


class DefaultCommandGroup(click.Group):
    """Command group that treats unknown leading arguments as ``sync`` arguments."""

    default_command = "sync"
    group_flags = ("--verbose", "--help", "-h")

    def parse_args(self, ctx, args):
        # --version wins wherever it appears
        if any(arg in VERSION_FLAGS for arg in args):
            return super().parse_args(ctx, ["--version"])

        index = 0
        while index < len(args) and args[index] in self.group_flags:
            index += 1

        if index < len(args) and args[index] not in self.commands:
            args = args[:index] + [self.default_command] + args[index:]

        return super().parse_args(ctx, args)


def print_version(ctx, param, value):
    if not value or ctx.resilient_parsing:
        return
    console.print(f"codesync v{get_version()}")
    ctx.exit(0)


@click.group(
    cls=DefaultCommandGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=(
        "Examples:\n\n"
        "  codesync ./src user@server:/app --ignore node_modules,dist,.git\n\n"
        "  codesync init ./src user@server:/app dev.json --ignore node_modules,tmp\n\n"
        "  codesync load dev.json"
    ),
)
@click.option(
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=print_version,
    help="Show version number",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose):
    """codesync - Auto-sync code files or directories over SSH.

    SOURCE is a local file or folder; DESTINATION is a remote location of
    the form user@ip[:port]:path.
    """
    setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help(), markup=False, highlight=False)


ignore_option = click.option(
    "--ignore",
    "ignore_folders",
    callback=parse_ignore_folders,
    metavar="FOLDERS",
    help="Comma-separated list of folders to ignore",
)

debounce_option = click.option(
    "--debounce",
    type=click.FloatRange(min=0),
    default=0.0,
    show_default=True,
    help="Seconds to wait for changes to settle before syncing",
)


@cli.command()
@click.argument("paths", nargs=-1, metavar="SOURCE DESTINATION")
@ignore_option
@debounce_option
@click.pass_context
def sync(ctx, paths, ignore_folders, debounce):
    """Start syncing SOURCE to DESTINATION immediately."""
    if len(paths) != 2:
        print_help(ctx)
        return
    source, destination = paths

    try:
        target = SyncTarget.resolve(source, destination, ignore_folders)
        run_session(target, SyncOptions(debounce=debounce))

    except CodeSyncError as e:
        print_failure(e.message, e)
        sys.exit(1)


@cli.command()
@click.argument("paths", nargs=-1, metavar="SOURCE DESTINATION [FILENAME]")
@ignore_option
@click.pass_context
def init(ctx, paths, ignore_folders):
    """Save settings to a config file (default: .codesync.json)."""
    if len(paths) not in (2, 3):
        print_help(ctx)
        return
    source, destination, filename = (paths + (None,))[:3]

    manager = ConfigManager(filename)

    try:
        settings = manager.create_settings(source, destination, ignore_folders)
        manager.save_settings(settings)
    except ConfigurationError as e:
        print_failure(e.message, e)
        sys.exit(1)

    console.print(f"[green]✓ Settings saved to {escape(manager.filename)}[/green]")
    print_settings(settings.source, settings.destination, settings.ignore_folders)

    load_hint = "codesync load" if manager.is_default else f"codesync load {manager.filename}"
    console.print(f"[bright_black]  Run '{escape(load_hint)}' to start syncing[/bright_black]")


@cli.command()
@click.argument("paths", nargs=-1, metavar="[FILENAME]")
@debounce_option
@click.pass_context
def load(ctx, paths, debounce):
    """Load settings from a config file and start syncing."""
    if len(paths) > 1:
        print_help(ctx)
        return
    manager = ConfigManager(paths[0] if paths else None)

    try:
        settings = manager.load_settings()
    except ConfigurationError as e:
        print_failure(e.message, e)
        if not os.path.exists(manager.config_path):
            init_hint = "codesync init <source> <destination>"
            if not manager.is_default:
                init_hint += f" {manager.filename}"
            console.print(f"[bright_black]  Run '{escape(init_hint)}' first[/bright_black]")
        sys.exit(1)

    console.print(f"[green]✓ Loaded settings from {escape(manager.filename)}[/green]")
    print_settings(
        settings.source,
        settings.destination,
        settings.ignore_folders,
        source_note=f" (relative to {manager.cwd})",
    )

    try:
        session = SyncSession.from_settings(
            settings, cwd=manager.cwd, options=SyncOptions(debounce=debounce), console=console
        )
        session.start()
    except CodeSyncError as e:
        print_failure(f"Failed to load settings: {e.message}", e)
        sys.exit(1)

    session.serve_forever()


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
