"""Walks over an extracted archive that decide what is removed or copied.

The ``find_*`` functions only look at the tree and return paths. Deleting
and copying happen in `remove_directories` and `copy_directories`, so the
selection rules can be tested on their own.
"""

from __future__ import annotations

import shutil
from collections.abc import Collection, Iterator
from pathlib import Path

from structlog.stdlib import BoundLogger

from ..constants import VCS_METADATA_DIR

__all__ = [
    "TreeSelector",
    "copy_directories",
    "copy_directory",
    "find_matching_directories",
    "find_vcs_directories",
    "remove_directories",
]


def _subdirectories(path: Path) -> Iterator[Path]:
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            yield child


def find_matching_directories(
    root: Path, names: Collection[str]
) -> list[Path]:
    """Find directories with one of the given names, depth first.

    A matching directory is not searched any further, so a match nested
    inside another match is not returned. Non-matching directories are
    searched recursively. The root itself is never matched.
    """
    if not names:
        return []
    found: list[Path] = []
    for child in _subdirectories(root):
        if child.name in names:
            found.append(child)
        else:
            found.extend(find_matching_directories(child, names))
    return found


def find_vcs_directories(root: Path) -> list[Path]:
    """Find git metadata directories anywhere under ``root``."""
    return find_matching_directories(root, {VCS_METADATA_DIR})


def remove_directories(paths: Collection[Path]) -> None:
    for path in paths:
        shutil.rmtree(path)


def copy_directory(src: Path, dest: Path) -> None:
    """Copy the contents of ``src`` into ``dest``.

    Destination directories are created as needed and existing files are
    overwritten. Files in ``dest`` that are not in ``src`` are kept.
    """
    dest.mkdir(parents=True, exist_ok=True)
    for entry in src.iterdir():
        target = dest / entry.name
        if entry.is_dir() and not entry.is_symlink():
            copy_directory(entry, target)
        else:
            shutil.copyfile(entry, target)


def copy_directories(paths: Collection[Path], dest: Path) -> list[Path]:
    """Copy each directory to a same-named directory directly under dest.

    Returns
    -------
    list of Path
        The destination directories, in the order they were written.
    """
    written = []
    for path in paths:
        target = dest / path.name
        copy_directory(path, target)
        written.append(target)
    return written


class TreeSelector:
    """Strip git metadata from an extracted archive and copy known
    directories into the working tree.

    Parameters
    ----------
    known_directories
        Names of the directories to copy.
    logger
        Logger to use.
    """

    def __init__(
        self, known_directories: Collection[str], logger: BoundLogger
    ) -> None:
        self._known = frozenset(known_directories)
        self._logger = logger

    def sanitize(self, root: Path) -> list[Path]:
        """Delete every ``.git`` directory under ``root``."""
        found = find_vcs_directories(root)
        for path in found:
            self._logger.info(
                "Removing git metadata", path=str(path.relative_to(root))
            )
        remove_directories(found)
        return found

    def select(self, root: Path, dest: Path) -> list[Path]:
        """Copy known directories found under ``root`` into ``dest``."""
        if not self._known:
            self._logger.debug("No known directories configured")
            return []
        found = find_matching_directories(root, self._known)
        if not found:
            self._logger.info(
                "No known directories found in archive",
                known_directories=sorted(self._known),
            )
            return []
        for path in found:
            self._logger.info(
                "Copying directory", path=str(path.relative_to(root))
            )
        return copy_directories(found, dest)
