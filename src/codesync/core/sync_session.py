"""
Sync session for codesync.

This module wires the exclusion resolver, command builder, process
manager, output printer and change watcher together for one source and
destination pair, and provides the main interface of the sync engine.
"""

import logging
import threading
import time
from typing import Optional

from rich.console import Console

from .exceptions import TransferError, WatchError
from .exclusions import ExclusionResolver
from .models import Settings, SyncOptions, SyncTarget
from .output import OutputPrinter
from .process_manager import ProcessManager, RunHandle
from .rsync_command import RsyncCommandBuilder, TransferCommand
from .shutdown import ShutdownHooks
from .state import EditState
from .watcher import ChangeWatcher


class SyncSession:
    """Mirrors one source tree to one destination until the process exits."""

    def __init__(
        self,
        target: SyncTarget,
        options: Optional[SyncOptions] = None,
        console: Optional[Console] = None,
        process_manager: Optional[ProcessManager] = None,
    ):
        """Initialize the session.

        Args:
            target: Resolved source, destination and exclusions
            options: Transfer and watch options
            console: Console that transfer output is rendered to
            process_manager: Process manager; a new one by default
        """
        self.target = target
        self.options = options or SyncOptions()
        self.logger = logging.getLogger(__name__)

        self.state = EditState()
        self.resolver = ExclusionResolver(self.options.ignore_filename)
        self.builder = RsyncCommandBuilder(self.options)
        self.process_manager = process_manager or ProcessManager()
        self.printer = OutputPrinter(self.state, console)
        self.shutdown_hooks = ShutdownHooks()

        self.command: Optional[TransferCommand] = None
        self.watcher: Optional[ChangeWatcher] = None
        self.closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cwd: Optional[str] = None,
        options: Optional[SyncOptions] = None,
        console: Optional[Console] = None,
    ) -> "SyncSession":
        """Create a session from a loaded settings record."""
        target = SyncTarget.resolve(
            settings.source, settings.destination, settings.ignore_folders, cwd=cwd
        )
        return cls(target, options=options, console=console)

    def start(self) -> TransferCommand:
        """Run once, then keep re-running on every change.

        Returns:
            The command reused for every run

        Raises:
            WatchError: If the source tree cannot be watched
        """
        exclusions = self.resolver.resolve(self.target.source_path, self.target.exclusions)
        self.command = self.builder.build(self.target, exclusions)
        self.logger.info(f"Syncing {self.target.source_path} -> {self.target.destination}")

        # Installed before the first run so no transfer can outlive the process
        self.shutdown_hooks.add(self._close)
        self.shutdown_hooks.add(self.process_manager.terminate_active)
        self.shutdown_hooks.install()

        self.sync()
        if self.closed:
            return self.command

        self.watcher = ChangeWatcher(
            self.target.source_path,
            self.state,
            self.sync,
            debounce=self.options.debounce,
        )
        try:
            self.watcher.start()
        except WatchError:
            self.process_manager.terminate_active()
            raise

        return self.command

    def sync(self) -> Optional[RunHandle]:
        """Start a run, replacing any run still in flight.

        Transfer failures are rendered, never raised.
        """
        if self.command is None:
            raise RuntimeError("Session has not been started")
        if self.closed:
            return None

        try:
            return self.process_manager.run(self.command, self.printer.feed, self._on_exit)
        except TransferError as e:
            self.logger.error(f"Transfer could not start: {e}")
            self.printer.print_error(e)
            return None

    def serve_forever(self, poll_interval: float = 1.0):
        """Block the calling thread; the session ends with the process."""
        while not self.closed:
            time.sleep(poll_interval)

    def _on_exit(self, handle: RunHandle, returncode: int, stderr: str):
        if returncode == 0:
            return

        error = TransferError(
            f"rsync exited with code {returncode}",
            returncode=returncode,
            command=handle.command_line,
            stderr=stderr,
        )
        self.logger.warning(f"Run {handle.generation} failed: {error}")
        self.printer.print_error(error)

    def _close(self):
        """Stop reacting to changes; runs before the active transfer is terminated."""
        with self._close_lock:
            if self.closed:
                return
            self.closed = True

        if self.watcher is not None:
            self.watcher.stop()
