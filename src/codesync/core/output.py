"""
Transfer output classification and printing for codesync.

rsync's verbose output is classified purely textually:

- lines that are empty or contain no path separator are headers or
  blank separators and are discarded;
- a line containing all of ``sent``, ``received`` and ``bytes/sec`` is the
  trailing summary line and is printed in blue;
- every other line names a transferred file or directory and is printed
  with a status marker: ``✓`` for the session's initial run, ``✎`` once a
  change has been observed.
"""

from enum import Enum
from typing import Optional

from rich.console import Console
from rich.text import Text

from .exceptions import TransferError
from .state import EditState

PATH_SEPARATOR = "/"
SUMMARY_MARKERS = ("sent", "received", "bytes/sec")

FIRST_RUN_MARKER = "✓ "
CHANGE_MARKER = "✎ "


class LineKind(str, Enum):
    """Kinds of transfer output lines worth printing."""
    SUMMARY = "summary"
    FILE = "file"


def is_summary_line(line: str) -> bool:
    """Check if ``line`` carries every summary marker."""
    return all(marker in line for marker in SUMMARY_MARKERS)


def classify_line(line: str) -> Optional[LineKind]:
    """Classify one line of transfer output.

    Returns None for lines that should be discarded.
    """
    if not line or PATH_SEPARATOR not in line:
        return None
    if is_summary_line(line):
        return LineKind.SUMMARY
    return LineKind.FILE


class OutputPrinter:
    """Renders transfer output to the console."""

    def __init__(self, state: EditState, console: Optional[Console] = None):
        self.state = state
        self.console = console or Console()

    def feed(self, chunk: str):
        """Split a chunk of raw output on newlines and render each line."""
        for line in chunk.split("\n"):
            self.render(line)

    def render(self, line: str) -> Optional[LineKind]:
        """Render a single line, returning how it was classified."""
        kind = classify_line(line)
        if kind is None:
            return None

        if kind is LineKind.SUMMARY:
            text = Text(line, style="blue")
        else:
            marker = Text(CHANGE_MARKER, style="yellow") if self.state.edited \
                else Text(FIRST_RUN_MARKER, style="green")
            text = Text.assemble(marker, line)

        self.console.print(text, soft_wrap=True)
        return kind

    def print_error(self, error: TransferError):
        """Render a transfer failure; the session keeps running."""
        self.console.print(Text(error.message, style="red"), soft_wrap=True)
        for line in error.stderr.splitlines():
            if line.strip():
                self.console.print(Text(line, style="red"), soft_wrap=True)
