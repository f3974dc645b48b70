"""Commit the working tree to a new branch and open a merge request."""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..constants import REMOTE_NAME
from ..exceptions import MergeRequestError
from ..models.merge_request import MergeRequestCreate
from ..storage.git import Git
from ..storage.gitlab import GitLabStorage

__all__ = ["ChangePublisher"]


class ChangePublisher:
    """Publish working tree changes as a GitLab merge request.

    Parameters
    ----------
    git
        Git client for the working tree, which must have the base branch
        checked out when `publish` is called.
    gitlab
        GitLab client for the target project.
    base_branch
        Branch the merge request targets.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        git: Git,
        gitlab: GitLabStorage,
        base_branch: str,
        logger: BoundLogger,
    ) -> None:
        self._git = git
        self._gitlab = gitlab
        self._base_branch = base_branch
        self._logger = logger

    async def publish(self, branch: str, message: str) -> str | None:
        """Commit everything to a new branch, push it, and open an MR.

        The commit is made even if nothing changed, so every archive gets a
        branch and a merge request.

        Parameters
        ----------
        branch
            Name of the branch to create.
        message
            Commit message.

        Returns
        -------
        str or None
            URL of the merge request, or `None` if it could not be created.

        Raises
        ------
        SubprocessError
            Raised if any git command fails.
        """
        logger = self._logger.bind(branch=branch)
        await self._git.checkout("-b", branch)
        await self._git.add("--all", ".")
        await self._git.commit("--allow-empty", "-m", message)
        logger.info("Committed changes", message=message)

        await self._git.push("-u", REMOTE_NAME, branch, "--force")
        logger.info("Pushed branch")

        return await self.request_merge(branch)

    async def request_merge(self, branch: str) -> str | None:
        """Ask GitLab to merge ``branch`` into the base branch.

        Failures are logged and not raised.
        """
        logger = self._logger.bind(branch=branch, target=self._base_branch)
        request = MergeRequestCreate.for_branch(branch, self._base_branch)
        try:
            mr = await self._gitlab.create_merge_request(request)
        except MergeRequestError as e:
            logger.error(
                "Error creating merge request",
                error=e.msg,
                status_code=e.status_code,
                body=e.body,
            )
            return None
        logger.info("Merge request created", url=mr.web_url)
        return mr.web_url
