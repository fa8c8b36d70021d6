"""
Rsync command construction for codesync.

This module turns a sync target and its exclusions into a reusable
description of the rsync invocation. Building a command never executes
anything; the same command is re-issued for every run of a session.
"""

import logging
import shlex
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import ExclusionSpec, SyncOptions, SyncTarget


class TransferCommand(BaseModel):
    """Immutable description of one rsync invocation."""

    model_config = ConfigDict(frozen=True)

    executable: str = Field("rsync", description="Transfer tool executable")
    shell: str = Field("ssh", description="Remote shell transport")
    flags: str = Field("avuz", description="Combined short flag group")
    delete: bool = Field(True, description="Delete extraneous destination files")
    source: str = Field(description="Local source path")
    destination: str = Field(description="Remote destination locator")
    exclude_from: Optional[str] = Field(None, description="Ignore file for --exclude-from")
    excludes: Tuple[str, ...] = Field(default_factory=tuple, description="--exclude entries")

    @property
    def argv(self) -> List[str]:
        """Argument vector, in the order rsync receives it."""
        args = [self.executable]

        if self.flags:
            args.append(f"-{self.flags}")
        args.append(f"--rsh={self.shell}")
        if self.delete:
            args.append("--delete")

        if self.exclude_from:
            args.append(f"--exclude-from={self.exclude_from}")
        for pattern in self.excludes:
            args.append(f"--exclude={pattern}")

        args.extend([self.source, self.destination])
        return args

    def exclusion_entries(self) -> List[str]:
        """Exclusion options only, ignore file first."""
        return [arg for arg in self.argv if arg.startswith("--exclude")]

    def __str__(self) -> str:
        return " ".join(shlex.quote(arg) for arg in self.argv)


class RsyncCommandBuilder:
    """Builds transfer commands with a stable set of options."""

    def __init__(self, options: Optional[SyncOptions] = None):
        self.options = options or SyncOptions()
        self.logger = logging.getLogger(__name__)

    def build(self, target: SyncTarget, exclusions: ExclusionSpec) -> TransferCommand:
        """Describe the rsync invocation for ``target``.

        Args:
            target: What to mirror and where
            exclusions: Resolved exclusion specification

        Returns:
            Command that can be executed any number of times
        """
        command = TransferCommand(
            executable=self.options.rsync_path,
            shell=self.options.shell,
            flags=self.options.flags,
            delete=self.options.delete,
            source=target.source_path,
            destination=target.destination,
            exclude_from=exclusions.ignore_file,
            excludes=exclusions.folders,
        )

        self.logger.debug(f"Built rsync command: {command}")
        return command
