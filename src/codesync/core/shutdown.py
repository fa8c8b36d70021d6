"""
Process-exit hooks for codesync.

A session registers its cleanup callables here. The hooks run once, on
SIGINT, SIGTERM or normal interpreter exit, so no transfer process
outlives the application.
"""

import atexit
import logging
import signal
import sys
import threading
from typing import Callable, List

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownHooks:
    """Ordered list of callables run once when the application exits."""

    def __init__(self):
        self.hooks: List[Callable[[], None]] = []
        self.installed = False
        self.ran = False
        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()

    def add(self, hook: Callable[[], None]):
        """Append a hook; hooks run in registration order."""
        with self._lock:
            self.hooks.append(hook)

    def install(self):
        """Register signal handlers and the exit hook. Only the first call has effect."""
        with self._lock:
            if self.installed:
                return
            self.installed = True

        for signum in HANDLED_SIGNALS:
            signal.signal(signum, self._signal_handler)
        atexit.register(self.run)
        self.logger.debug("Shutdown hooks installed")

    def run(self):
        """Run every hook once; later calls are no-ops."""
        with self._lock:
            if self.ran:
                return
            self.ran = True
            hooks = list(self.hooks)

        for hook in hooks:
            try:
                hook()
            except Exception as e:
                self.logger.error(f"Shutdown hook {hook!r} failed: {e}")

    def _signal_handler(self, signum, frame):
        self.logger.info(f"Received signal {signal.Signals(signum).name}, shutting down")
        self.run()
        sys.exit(0)
