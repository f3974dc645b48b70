"""Models for archives waiting in the intake directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..constants import ARCHIVE_SUFFIX

__all__ = ["Archive"]


@dataclass(frozen=True)
class Archive:
    """A zip archive to import.

    The file name identifies the archive: it names both the branch and the
    scratch directory the archive is extracted into.
    """

    path: Path

    @property
    def name(self) -> str:
        """File name of the archive, including the suffix."""
        return self.path.name

    @property
    def stem(self) -> str:
        """File name of the archive without the ``.zip`` suffix."""
        return self.path.name.removesuffix(ARCHIVE_SUFFIX)

    def branch_name(self, prefix: str) -> str:
        """Name of the branch this archive is committed to."""
        return f"{prefix}-{self.stem}"

    @property
    def commit_message(self) -> str:
        return f"Add files from {self.name}"
