"""
Exclusion resolution for codesync.

Determines which paths a transfer skips: an optional ignore file directly
under the source root, plus an explicit list of folder names.
"""

import logging
import os
from typing import Iterable, Optional

from .models import DEFAULT_IGNORE_FILENAME, ExclusionSpec


class ExclusionResolver:
    """Resolves the exclusion specification for a source tree."""

    def __init__(self, ignore_filename: str = DEFAULT_IGNORE_FILENAME):
        """Initialize the resolver.

        Args:
            ignore_filename: Name of the ignore file looked up in the source root
        """
        self.ignore_filename = ignore_filename
        self.logger = logging.getLogger(__name__)

    def ignore_file_path(self, source_path: str) -> str:
        """Path where the ignore file for ``source_path`` would live."""
        return os.path.join(source_path, self.ignore_filename)

    def resolve(
        self, source_path: str, folders: Optional[Iterable[str]] = None
    ) -> ExclusionSpec:
        """Combine the ignore file (if any) with the explicit folder list.

        Folder order is preserved and duplicates are kept; rsync treats
        repeated excludes idempotently. A missing ignore file is normal.
        """
        candidate = self.ignore_file_path(source_path)
        ignore_file = candidate if os.path.isfile(candidate) else None

        if ignore_file:
            self.logger.debug(f"Using ignore file: {ignore_file}")
        else:
            self.logger.debug(f"No {self.ignore_filename} in {source_path}")

        return ExclusionSpec(ignore_file=ignore_file, folders=tuple(folders or ()))
