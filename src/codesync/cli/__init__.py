"""
Command Line Interface for codesync.

This package provides the ``codesync`` and ``sshync`` commands.
"""

__all__ = []
