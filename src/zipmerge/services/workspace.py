"""Preparation of the intake directory and the repository clone."""

from __future__ import annotations

import shutil
from pathlib import Path

from structlog.stdlib import BoundLogger

from ..constants import ARCHIVE_SUFFIX
from ..models.archive import Archive
from ..storage.git import Git

__all__ = ["WorkspacePreparer", "list_archives"]


def list_archives(intake_dir: Path) -> list[Archive]:
    """Return the archives in the intake directory, creating it if needed.

    Archives are returned in directory listing order.
    """
    intake_dir.mkdir(parents=True, exist_ok=True)
    return [
        Archive(path=p)
        for p in intake_dir.iterdir()
        if p.is_file() and p.name.endswith(ARCHIVE_SUFFIX)
    ]


class WorkspacePreparer:
    """Produce a fresh clone of the target repository.

    Parameters
    ----------
    repo_url
        Remote to clone.
    base_branch
        Branch to check out after cloning.
    git
        Git client whose ``repo`` is the clone directory.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        repo_url: str,
        base_branch: str,
        git: Git,
        logger: BoundLogger,
    ) -> None:
        if git.repo is None:
            raise ValueError("Git client repository cannot be 'None'")
        self._repo_url = repo_url
        self._base_branch = base_branch
        self._git = git
        self._repo_dir = git.repo
        self._logger = logger.bind(repo_dir=str(self._repo_dir))

    async def prepare(self) -> None:
        """Discard any existing clone, clone again, and check out the base
        branch.

        Raises
        ------
        SubprocessError
            Raised if clone, fetch, or checkout fails.
        """
        if self._repo_dir.exists():
            self._logger.info("Removing existing clone")
            shutil.rmtree(self._repo_dir)
        self._repo_dir.mkdir(parents=True)

        self._logger.info("Cloning repository")
        await self._git.clone(self._repo_url, str(self._repo_dir.resolve()))
        await self._git.fetch("--all")
        await self._git.checkout(self._base_branch)
        self._logger.info("Checked out base branch", branch=self._base_branch)
