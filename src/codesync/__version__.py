"""Version information for codesync."""

__version__ = "1.3.0"

MINIMUM_PYTHON_VERSION = (3, 8)


def get_version() -> str:
    """Get the current version string."""
    return __version__
