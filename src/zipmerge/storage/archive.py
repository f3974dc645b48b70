"""Extraction of zip archives into a scratch directory."""

from __future__ import annotations

import shutil
import stat
import zipfile
import zlib
from pathlib import Path

from structlog.stdlib import BoundLogger

from ..exceptions import ArchiveError

__all__ = ["extract_archive"]


def _is_symlink(info: zipfile.ZipInfo) -> bool:
    return stat.S_ISLNK(info.external_attr >> 16)


def _target_path(info: zipfile.ZipInfo, dest: Path, archive: Path) -> Path:
    """Resolve where an entry is written, refusing paths outside ``dest``."""
    member = Path(info.filename)
    target = (dest / member).resolve()
    if member.is_absolute() or not target.is_relative_to(dest):
        msg = f"Entry {info.filename} is outside the extraction directory"
        raise ArchiveError(msg, archive=archive)
    return target


def extract_archive(
    archive: Path, dest: Path, logger: BoundLogger | None = None
) -> None:
    """Extract every entry of a zip archive under ``dest``.

    Directory entries are created, with their parents. File entries get
    their parent directory created and their content streamed to disk. This
    returns only once every entry has been written.

    Parameters
    ----------
    archive
        Path to the zip file.
    dest
        Directory to extract into. Created if it does not exist.
    logger
        Logger for per-entry debug messages.

    Raises
    ------
    ArchiveError
        Raised if the archive is not a readable zip file, if an entry is
        corrupt, or if an entry would be written outside ``dest``.
    """
    dest.mkdir(parents=True, exist_ok=True)
    dest = dest.resolve()
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if _is_symlink(info):
                    if logger:
                        logger.debug("Skipping symlink", entry=info.filename)
                    continue
                target = _target_path(info, dest, archive)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, target.open("wb") as out:
                    shutil.copyfileobj(src, out)
                if logger:
                    logger.debug("Extracted file", entry=info.filename)
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        msg = f"Cannot read archive: {e!s}"
        raise ArchiveError(msg, archive=archive) from e
