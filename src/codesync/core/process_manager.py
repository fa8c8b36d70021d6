"""
Transfer process lifecycle management for codesync.

This module starts rsync processes without blocking the caller, streams
their output to a callback from a reader thread, and terminates them on
demand. A manager owns at most one active run: starting a new run always
terminates the previous one first.
"""

import logging
import subprocess
import threading
import time
from typing import Callable, List, Optional

from .exceptions import TransferError
from .rsync_command import TransferCommand

OutputCallback = Callable[[str], None]
ExitCallback = Callable[["RunHandle", int, str], None]


class RunHandle:
    """Ownership of one in-flight transfer process."""

    def __init__(self, process: subprocess.Popen, generation: int, command_line: str):
        self.process = process
        self.generation = generation
        self.command_line = command_line
        self.started_at = time.time()
        self.terminated = False
        self.returncode: Optional[int] = None
        self._lock = threading.Lock()
        self._reader: Optional[threading.Thread] = None

    @property
    def pid(self) -> int:
        return self.process.pid

    def is_running(self) -> bool:
        """Check if the process has not exited yet."""
        return self.process.poll() is None

    def terminate(self, timeout: float = 5.0) -> bool:
        """Terminate the process. Idempotent.

        Once terminated, no further output from this run is delivered.
        Returns True only if a signal was actually sent.
        """
        with self._lock:
            already_terminated = self.terminated
            self.terminated = True

        if already_terminated or self.process.poll() is not None:
            return False

        try:
            self.process.terminate()
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()
        except ProcessLookupError:
            return False

        return True

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Wait for the process to exit and its output to be consumed."""
        if self._reader is not None:
            self._reader.join(timeout)
        return self.process.poll()

    def __repr__(self) -> str:
        return (
            f"RunHandle(generation={self.generation}, pid={self.pid}, "
            f"terminated={self.terminated})"
        )


class ProcessManager:
    """Starts transfer runs and tracks the active one."""

    def __init__(self, grace_period: float = 5.0):
        """Initialize the process manager.

        Args:
            grace_period: Seconds to wait after SIGTERM before killing
        """
        self.grace_period = grace_period
        self.logger = logging.getLogger(__name__)
        self._active: Optional[RunHandle] = None
        self._generation = 0
        # Reentrant: a signal handler may fire while run() holds the lock
        self._lock = threading.RLock()

    @property
    def active(self) -> Optional[RunHandle]:
        """The most recently started run, if it is still in flight."""
        with self._lock:
            return self._active

    def run(
        self,
        command: TransferCommand,
        on_output: OutputCallback,
        on_exit: Optional[ExitCallback] = None,
    ) -> RunHandle:
        """Start ``command`` and return immediately.

        Any run still in flight is terminated before the new one starts.

        Raises:
            TransferError: If the transfer tool cannot be started
        """
        with self._lock:
            if self._active is not None:
                self.terminate(self._active)

            self._generation += 1
            argv = list(command.argv)
            command_line = str(command)

            try:
                process = subprocess.Popen(
                    argv,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    errors="replace",
                    bufsize=1,
                )
            except OSError as e:
                self._active = None
                raise TransferError(
                    f"Failed to start {argv[0]}: {e}", command=command_line
                ) from e

            handle = RunHandle(process, self._generation, command_line)
            self._active = handle

        self.logger.info(f"Started run {handle.generation} (pid {handle.pid})")

        reader = threading.Thread(
            target=self._pump,
            args=(handle, on_output, on_exit),
            name=f"codesync-run-{handle.generation}",
            daemon=True,
        )
        handle._reader = reader
        reader.start()
        return handle

    def terminate(self, handle: Optional[RunHandle]):
        """Terminate ``handle``; a no-op for finished or terminated runs."""
        if handle is None:
            return

        if handle.terminate(self.grace_period):
            self.logger.info(f"Terminated run {handle.generation} (pid {handle.pid})")

    def terminate_active(self):
        """Terminate whatever run is currently in flight."""
        with self._lock:
            handle = self._active
            self._active = None
        self.terminate(handle)

    def _release(self, handle: RunHandle):
        with self._lock:
            if self._active is handle:
                self._active = None

    def _pump(
        self,
        handle: RunHandle,
        on_output: OutputCallback,
        on_exit: Optional[ExitCallback],
    ):
        """Stream stdout to ``on_output`` until the process exits."""
        process = handle.process
        error_lines: List[str] = []

        stderr_reader = threading.Thread(
            target=lambda: error_lines.extend(process.stderr), daemon=True
        )
        stderr_reader.start()

        # Keep draining after termination so the child never blocks on a full pipe
        for line in process.stdout:
            if handle.terminated:
                continue
            try:
                on_output(line)
            except Exception as e:
                self.logger.exception(f"Output handler failed: {e}")

        stderr_reader.join()
        handle.returncode = process.wait()
        process.stdout.close()
        process.stderr.close()
        self._release(handle)

        duration = time.time() - handle.started_at
        self.logger.debug(
            f"Run {handle.generation} exited with code {handle.returncode} "
            f"after {duration:.1f}s"
        )

        if handle.terminated or on_exit is None:
            return

        try:
            on_exit(handle, handle.returncode, "".join(error_lines))
        except Exception as e:
            self.logger.exception(f"Exit handler failed: {e}")
