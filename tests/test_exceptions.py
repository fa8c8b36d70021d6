#!/usr/bin/env python3
"""
Tests for the codesync error hierarchy.
"""

import os
import sys

# Add src to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from codesync.core import (
    CodeSyncError,
    ConfigurationError,
    TransferError,
    ValidationError,
    WatchError,
)


class TestErrorHierarchy:
    """Test error codes, details and serialization."""

    def test_base_error_defaults_code_to_class_name(self):
        error = CodeSyncError("Something broke")

        assert error.error_code == "CodeSyncError"
        assert str(error) == "Something broke"

    def test_to_dict(self):
        error = ValidationError(
            "Source path does not exist: /tmp/gone", field_name="source", field_value="gone"
        )

        assert error.to_dict() == {
            "error_type": "ValidationError",
            "error_code": "VALIDATION_ERROR",
            "message": "Source path does not exist: /tmp/gone",
            "details": {"field_name": "source", "field_value": "gone"},
        }

    def test_configuration_error_details(self):
        error = ConfigurationError(
            "Invalid settings file format",
            config_path="/tmp/.codesync.json",
            validation_errors=["destination: Field required"],
        )

        assert error.error_code == "CONFIG_ERROR"
        assert error.details["validation_errors"] == ["destination: Field required"]
        assert "Details:" in str(error)

    def test_transfer_error_keeps_stderr_out_of_details(self):
        error = TransferError(
            "rsync exited with code 23", returncode=23, command="rsync -avuz", stderr="oops\n"
        )

        assert error.to_dict()["details"] == {"returncode": 23, "command": "rsync -avuz"}
        assert error.stderr == "oops\n"

    def test_all_errors_share_base(self):
        for error in (WatchError("w", path="/src"), TransferError("t"), ValidationError("v")):
            assert isinstance(error, CodeSyncError)
