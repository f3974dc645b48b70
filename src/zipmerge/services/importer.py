"""Import every archive in the intake directory."""

from __future__ import annotations

import shutil
from pathlib import Path

from structlog.stdlib import BoundLogger

from ..constants import INTAKE_DIR, REPOSITORY_DIR
from ..exceptions import ArchiveError
from ..models.archive import Archive
from ..models.run import ArchiveResult, ImportState
from ..storage.archive import extract_archive
from ..storage.git import Git
from .publisher import ChangePublisher
from .tree import TreeSelector
from .workspace import WorkspacePreparer, list_archives

__all__ = ["ArchiveImporter"]


class ArchiveImporter:
    """Turn each archive into a branch and a merge request.

    Archives are processed one at a time because they all share the same
    working tree. Any failure other than the merge request API call stops
    the run.

    Parameters
    ----------
    work_dir
        Directory the per-archive scratch directories are created in.
    intake_dir
        Directory scanned for archives.
    base_branch
        Branch checked out before each archive.
    branch_name_prefix
        Prefix of generated branch names.
    git
        Git client for the working tree.
    workspace
        Creates the working tree.
    selector
        Strips and copies the extracted archive contents.
    publisher
        Commits, pushes, and opens the merge request.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        work_dir: Path,
        intake_dir: Path,
        base_branch: str,
        branch_name_prefix: str,
        git: Git,
        workspace: WorkspacePreparer,
        selector: TreeSelector,
        publisher: ChangePublisher,
        logger: BoundLogger,
    ) -> None:
        if git.repo is None:
            raise ValueError("Git client repository cannot be 'None'")
        self._work_dir = work_dir
        self._intake_dir = intake_dir
        self._base_branch = base_branch
        self._prefix = branch_name_prefix
        self._git = git
        self._repo_dir = git.repo
        self._workspace = workspace
        self._selector = selector
        self._publisher = publisher
        self._logger = logger
        self.state = ImportState.IDLE

    async def run(self) -> list[ArchiveResult]:
        """Prepare the working tree and import every archive.

        Returns
        -------
        list of ArchiveResult
            One entry per archive, in processing order.
        """
        try:
            archives = list_archives(self._intake_dir)
            self._logger.info(
                "Found archives",
                count=len(archives),
                intake_dir=str(self._intake_dir),
            )
            self.state = ImportState.PREPARING_WORKSPACE
            await self._workspace.prepare()

            results: list[ArchiveResult] = []
            for archive in archives:
                results.append(await self.import_archive(archive))
        except Exception:
            self.state = ImportState.FAILED
            raise

        self.state = ImportState.DONE
        created = sum(1 for r in results if r.merge_request_url)
        self._logger.info(
            "Import finished",
            archives=len(results),
            merge_requests=created,
        )
        return results

    async def import_archive(self, archive: Archive) -> ArchiveResult:
        """Import one archive and return to the base branch afterwards.

        The scratch directory is removed whether or not the import
        succeeded.
        """
        branch = archive.branch_name(self._prefix)
        logger = self._logger.bind(archive=archive.name, branch=branch)
        logger.info("Importing archive")
        scratch = self._scratch_dir(archive)
        if scratch.exists():
            logger.info("Removing stale scratch directory")
            shutil.rmtree(scratch)

        try:
            self.state = ImportState.EXTRACTING
            extract_archive(archive.path, scratch, logger)

            self.state = ImportState.SANITIZING
            self._selector.sanitize(scratch)

            self.state = ImportState.SELECTING
            self._selector.select(scratch, self._repo_dir)

            self.state = ImportState.PUBLISHING
            url = await self._publisher.publish(branch, archive.commit_message)
        finally:
            if scratch.exists():
                shutil.rmtree(scratch)

        self.state = ImportState.RESTORING_BASE_BRANCH
        await self._git.checkout(self._base_branch)
        logger.info("Archive imported")
        return ArchiveResult(
            archive=archive.name, branch=branch, merge_request_url=url
        )

    def _scratch_dir(self, archive: Archive) -> Path:
        if archive.stem in ("", ".", "..", INTAKE_DIR, REPOSITORY_DIR):
            msg = f"{archive.name} cannot be used as a scratch directory name"
            raise ArchiveError(msg, archive=archive.path)
        return self._work_dir / archive.stem
