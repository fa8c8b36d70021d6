"""
Pydantic models for codesync configuration and data structures.

This module defines the records passed between the sync engine's
components, providing validation, serialization, and type safety.
"""

import os
from datetime import datetime, timezone
from typing import Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ValidationError

DEFAULT_IGNORE_FILENAME = ".codesyncignore"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SyncOptions(BaseModel):
    """Options shared by every transfer a session issues."""

    rsync_path: str = Field("rsync", description="Transfer tool executable")
    shell: str = Field("ssh", description="Remote shell transport (--rsh)")
    flags: str = Field("avuz", description="Combined short flag group")
    delete: bool = Field(True, description="Delete extraneous files (--delete)")
    ignore_filename: str = Field(
        DEFAULT_IGNORE_FILENAME,
        description="Ignore file looked up directly under the source root"
    )
    debounce: float = Field(
        0.0, description="Seconds to coalesce change bursts (0 disables)"
    )

    @field_validator('debounce')
    @classmethod
    def validate_debounce(cls, v):
        """Debounce window cannot be negative."""
        if v < 0:
            raise ValueError("debounce must be zero or a positive number of seconds")
        return v

    @field_validator('flags')
    @classmethod
    def validate_flags(cls, v):
        """Flags are a group of single-letter short options."""
        if not v.isalpha():
            raise ValueError(f"flags must be letters only, got {v!r}")
        return v


class SyncTarget(BaseModel):
    """What one session mirrors, and where to."""

    model_config = ConfigDict(frozen=True)

    source_path: str = Field(description="Absolute local source path")
    destination: str = Field(description="[user@]host[:port]:path locator")
    exclusions: Tuple[str, ...] = Field(
        default_factory=tuple, description="Folder names or patterns to exclude"
    )

    @field_validator('source_path')
    @classmethod
    def validate_source_path(cls, v):
        """Source path must already be resolved."""
        if not os.path.isabs(v):
            raise ValueError(f"source_path must be absolute: {v}")
        return v

    @classmethod
    def resolve(
        cls,
        source: str,
        destination: str,
        exclusions: Optional[List[str]] = None,
        cwd: Optional[str] = None,
    ) -> "SyncTarget":
        """Build a target from a source path relative to ``cwd``.

        Raises:
            ValidationError: If the source path does not exist
        """
        base = cwd or os.getcwd()
        source_path = os.path.abspath(os.path.join(base, os.path.expanduser(source)))

        if not os.path.exists(source_path):
            raise ValidationError(
                f"Source path does not exist: {source_path}",
                field_name="source",
                field_value=source,
            )

        return cls(
            source_path=source_path,
            destination=destination,
            exclusions=tuple(exclusions or ()),
        )


class ExclusionSpec(BaseModel):
    """Combined exclusion specification for a transfer."""

    model_config = ConfigDict(frozen=True)

    ignore_file: Optional[str] = Field(None, description="Ignore file path, if present")
    folders: Tuple[str, ...] = Field(default_factory=tuple, description="Explicit exclusions")

    @property
    def has_ignore_file(self) -> bool:
        return self.ignore_file is not None


class Settings(BaseModel):
    """Persisted settings record, as stored in a settings file."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(description="Source path relative to the invocation directory")
    destination: str = Field(description="Destination locator")
    ignore_folders: List[str] = Field(
        default_factory=list, alias="ignoreFolders", description="Folders to exclude"
    )
    created: str = Field(default_factory=utc_timestamp, description="ISO-8601 timestamp")

    @field_validator('source', 'destination')
    @classmethod
    def validate_not_empty(cls, v):
        """Both ends of the sync must be given."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator('ignore_folders', mode='before')
    @classmethod
    def validate_ignore_folders(cls, v):
        """A missing list in older settings files means no exclusions."""
        return v or []
