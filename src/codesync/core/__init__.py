"""
Core modules for codesync.

This package contains the sync orchestration engine: exclusion resolution,
rsync command construction, transfer process management, output printing,
change watching, and the session that ties them together.
"""

from .config_manager import DEFAULT_SETTINGS_FILE, ConfigManager
from .exceptions import (
    CodeSyncError,
    ConfigurationError,
    TransferError,
    ValidationError,
    WatchError,
)
from .exclusions import ExclusionResolver
from .models import ExclusionSpec, Settings, SyncOptions, SyncTarget
from .output import LineKind, OutputPrinter, classify_line
from .process_manager import ProcessManager, RunHandle
from .rsync_command import RsyncCommandBuilder, TransferCommand
from .shutdown import ShutdownHooks
from .state import EditState
from .sync_session import SyncSession
from .watcher import ChangeWatcher

__all__ = [
    # Engine
    "SyncSession",
    "ExclusionResolver",
    "RsyncCommandBuilder",
    "ProcessManager",
    "OutputPrinter",
    "ChangeWatcher",
    "ShutdownHooks",
    "ConfigManager",
    # Models and state
    "SyncTarget",
    "SyncOptions",
    "ExclusionSpec",
    "Settings",
    "TransferCommand",
    "RunHandle",
    "EditState",
    "LineKind",
    "classify_line",
    "DEFAULT_SETTINGS_FILE",
    # Exceptions
    "CodeSyncError",
    "ConfigurationError",
    "TransferError",
    "ValidationError",
    "WatchError",
]
