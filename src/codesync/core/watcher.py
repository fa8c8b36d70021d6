"""
Filesystem change watching for codesync.

Observes the source tree recursively with watchdog and re-triggers the
sync pipeline on every change event.
"""

import logging
import os
import threading
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .exceptions import WatchError
from .state import EditState

# Access notifications; rsync reading the tree would otherwise retrigger itself
READ_ONLY_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


class ChangeWatcher(FileSystemEventHandler):
    """Marks the session edited and triggers a run for each change."""

    def __init__(
        self,
        path: str,
        state: EditState,
        trigger: Callable[[], None],
        debounce: float = 0.0,
    ):
        """Initialize the watcher.

        Args:
            path: Resolved source path to watch recursively
            state: Session edit state, set on the first event
            trigger: Callable that starts a run
            debounce: Seconds to coalesce bursts; 0 runs once per event
        """
        super().__init__()
        self.path = path
        self.state = state
        self.trigger = trigger
        self.debounce = debounce
        self.logger = logging.getLogger(__name__)

        self._single_file = os.path.isfile(path)
        self.events_detected = 0
        self.observer: Optional[Observer] = None
        self.sync_timer: Optional[threading.Timer] = None
        self.timer_lock = threading.Lock()

    def on_any_event(self, event: FileSystemEvent):
        """Handle any file system event."""
        if event.event_type in READ_ONLY_EVENT_TYPES:
            return
        if self._single_file and not self._concerns_file(event):
            return

        self.events_detected += 1
        self.logger.debug(f"{event.event_type}: {event.src_path}")
        self.state.mark()

        if self.debounce > 0:
            self._schedule_sync()
        else:
            self.trigger()

    def _concerns_file(self, event: FileSystemEvent) -> bool:
        paths = {event.src_path, getattr(event, "dest_path", "")}
        return any(os.fsdecode(p) == self.path for p in paths if p)

    def _schedule_sync(self):
        """Restart the debounce timer."""
        with self.timer_lock:
            if self.sync_timer:
                self.sync_timer.cancel()

            self.sync_timer = threading.Timer(self.debounce, self.trigger)
            self.sync_timer.daemon = True
            self.sync_timer.start()

    def start(self):
        """Subscribe to change notifications.

        Raises:
            WatchError: If the subscription cannot be established
        """
        if not os.path.exists(self.path):
            raise WatchError(f"Cannot watch {self.path}: path does not exist", path=self.path)

        # A single-file source is watched through its parent directory
        if self._single_file:
            watch_path, recursive = os.path.dirname(self.path), False
        else:
            watch_path, recursive = self.path, True

        observer = Observer()
        try:
            observer.schedule(self, watch_path, recursive=recursive)
            observer.start()
        except (OSError, RuntimeError) as e:
            raise WatchError(f"Cannot watch {self.path}: {e}", path=self.path) from e

        self.observer = observer
        self.logger.info(f"Watching {self.path}")

    def stop(self):
        """Stop watching and cancel any pending debounced run."""
        with self.timer_lock:
            if self.sync_timer:
                self.sync_timer.cancel()
                self.sync_timer = None

        if self.observer is not None:
            self.observer.stop()
            if self.observer.is_alive() and threading.current_thread() is not self.observer:
                self.observer.join(timeout=2)
            self.observer = None
