"""
codesync - Auto-sync code files or directories over SSH

Mirrors a local file tree to a remote host with rsync, re-running the
transfer every time something in the tree changes.

Example Usage:
    >>> from codesync import SyncSession, SyncTarget
    >>> target = SyncTarget.resolve("./src", "user@server:/app", ["node_modules"])
    >>> session = SyncSession(target)
    >>> session.start()
    >>> session.serve_forever()

CLI Usage:
    $ codesync ./src user@server:/app --ignore node_modules,dist
    $ codesync init ./src user@server:/app dev.json
    $ codesync load dev.json
"""

from .__version__ import __version__, get_version

# Core components
from .core.sync_session import SyncSession
from .core.config_manager import ConfigManager
from .core.process_manager import ProcessManager
from .core.rsync_command import RsyncCommandBuilder, TransferCommand

# Exceptions
from .core.exceptions import (
    CodeSyncError,
    ConfigurationError,
    TransferError,
    ValidationError,
    WatchError,
)

# Models
from .core.models import Settings, SyncOptions, SyncTarget

__all__ = [
    # Version information
    "__version__",
    "get_version",

    # Core classes
    "SyncSession",
    "ConfigManager",
    "ProcessManager",
    "RsyncCommandBuilder",
    "TransferCommand",

    # Exceptions
    "CodeSyncError",
    "ConfigurationError",
    "TransferError",
    "ValidationError",
    "WatchError",

    # Models
    "Settings",
    "SyncOptions",
    "SyncTarget",
]

# Package metadata
__title__ = "codesync"
__description__ = "Auto-sync code files or directories over SSH"
__license__ = "MIT"

# Compatibility check
import sys
from .__version__ import MINIMUM_PYTHON_VERSION

if sys.version_info < MINIMUM_PYTHON_VERSION:
    raise RuntimeError(
        f"codesync requires Python {'.'.join(map(str, MINIMUM_PYTHON_VERSION))} "
        f"or higher. You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )
