#!/usr/bin/env python3
"""
Tests for transfer output classification and printing.
"""

import io
import os
import sys

import pytest
from rich.console import Console

# Add src to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from codesync.core import EditState, LineKind, OutputPrinter, TransferError, classify_line

SUMMARY = "sent 1,234 bytes  received 56 bytes  2,580.00 bytes/sec"


class TestClassifyLine:
    """Test the textual line classification."""

    @pytest.mark.parametrize("line", ["", "sending incremental file list", "total size is 10  speedup is 0.01"])
    def test_lines_without_separator_discarded(self, line):
        assert classify_line(line) is None

    def test_summary_line(self):
        assert classify_line(SUMMARY) is LineKind.SUMMARY

    def test_summary_markers_anywhere_in_line(self):
        assert classify_line("x received y sent z bytes/sec") is LineKind.SUMMARY

    @pytest.mark.parametrize(
        "line",
        [
            "proj/sent.txt",
            "proj/received/",
            "docs/bytes/sec",
            "sent/received.txt",
        ],
    )
    def test_partial_markers_are_file_lines(self, line):
        assert classify_line(line) is LineKind.FILE

    def test_file_line(self):
        assert classify_line("proj/src/main.py") is LineKind.FILE

    def test_garbled_line_with_separator_passes_through(self):
        assert classify_line("��/\x00") is LineKind.FILE


class TestOutputPrinter:
    """Test rendering with status markers."""

    def setup_method(self):
        self.buffer = io.StringIO()
        self.console = Console(file=self.buffer, color_system=None, width=200)
        self.state = EditState()
        self.printer = OutputPrinter(self.state, self.console)

    def output_lines(self):
        return self.buffer.getvalue().splitlines()

    def test_first_run_marker(self):
        self.printer.render("proj/a.txt")

        assert self.output_lines() == ["✓ proj/a.txt"]

    def test_change_marker_after_edit(self):
        self.state.mark()
        self.printer.render("proj/a.txt")

        assert self.output_lines() == ["✎ proj/a.txt"]

    def test_edit_state_stays_set(self):
        self.state.mark()
        self.state.mark()
        self.printer.render("proj/a.txt")
        self.printer.render("proj/b.txt")

        assert self.output_lines() == ["✎ proj/a.txt", "✎ proj/b.txt"]

    def test_summary_line_has_no_marker(self):
        self.printer.render(SUMMARY)

        assert self.output_lines() == [SUMMARY]

    def test_discarded_lines_not_rendered(self):
        assert self.printer.render("sending incremental file list") is None
        assert self.printer.render("") is None
        assert self.buffer.getvalue() == ""

    def test_markup_in_file_names_printed_literally(self):
        self.printer.render("proj/[bold]weird[/bold].txt")

        assert self.output_lines() == ["✓ proj/[bold]weird[/bold].txt"]

    def test_feed_splits_chunks(self):
        chunk = "sending incremental file list\nproj/\nproj/a.txt\n\n" + SUMMARY + "\ntotal size is 5\n"
        self.printer.feed(chunk)

        assert self.output_lines() == ["✓ proj/", "✓ proj/a.txt", SUMMARY]

    def test_print_error(self):
        error = TransferError(
            "rsync exited with code 255",
            returncode=255,
            stderr="ssh: connect to host example port 22: Connection refused\n",
        )
        self.printer.print_error(error)

        assert self.output_lines() == [
            "rsync exited with code 255",
            "ssh: connect to host example port 22: Connection refused",
        ]


class TestEditState:
    """Test the session edit flag."""

    def test_starts_false_and_never_resets(self):
        state = EditState()
        assert not state.edited
        assert not state

        state.mark()
        state.mark()
        assert state.edited
        assert state
