"""
Exception classes for codesync.

This module defines the custom exceptions used by the sync engine and the
CLI, providing a single error hierarchy with structured details.
"""

from typing import Optional, Dict, Any, List


class CodeSyncError(Exception):
    """Base exception for all codesync errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize CodeSyncError.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for programmatic handling
            details: Additional error details and context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(CodeSyncError):
    """Raised when a settings file cannot be read, parsed or written."""

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        validation_errors: Optional[List[str]] = None
    ):
        """Initialize ConfigurationError.

        Args:
            message: Error message
            config_path: Path to the settings file with issues
            validation_errors: List of specific validation errors
        """
        details = {}
        if config_path:
            details["config_path"] = config_path
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(message, "CONFIG_ERROR", details)
        self.config_path = config_path
        self.validation_errors = validation_errors or []


class WatchError(CodeSyncError):
    """Raised when the source tree cannot be watched for changes."""

    def __init__(self, message: str, path: Optional[str] = None):
        details = {"path": path} if path else {}
        super().__init__(message, "WATCH_ERROR", details)
        self.path = path


class TransferError(CodeSyncError):
    """Raised when the transfer tool fails to start or exits non-zero."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        command: Optional[str] = None,
        stderr: Optional[str] = None
    ):
        """Initialize TransferError.

        Args:
            message: Error message
            returncode: Exit code reported by the transfer tool
            command: The command line that was executed
            stderr: Error output captured from the transfer tool
        """
        details = {}
        if returncode is not None:
            details["returncode"] = returncode
        if command:
            details["command"] = command

        super().__init__(message, "TRANSFER_ERROR", details)
        self.returncode = returncode
        self.command = command
        self.stderr = stderr or ""


class ValidationError(CodeSyncError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None
    ):
        details = {}
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)

        super().__init__(message, "VALIDATION_ERROR", details)
        self.field_name = field_name
        self.field_value = field_value
