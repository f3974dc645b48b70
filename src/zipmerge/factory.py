"""Component factory for zipmerge."""

from __future__ import annotations

import structlog
from httpx import AsyncClient
from safir.slack.webhook import SlackWebhookClient
from structlog.stdlib import BoundLogger

from .config import Configuration
from .services.importer import ArchiveImporter
from .services.publisher import ChangePublisher
from .services.tree import TreeSelector
from .services.workspace import WorkspacePreparer
from .storage.git import Git
from .storage.gitlab import GitLabStorage

__all__ = ["Factory"]


class Factory:
    """Build the components of an import run from its configuration.

    Parameters
    ----------
    config
        Configuration of the run.
    http_client
        Shared HTTP client. The caller is responsible for closing it.
    logger
        Logger to use. Defaults to the ``zipmerge`` logger.
    """

    def __init__(
        self,
        config: Configuration,
        http_client: AsyncClient,
        logger: BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._logger = logger if logger else structlog.get_logger("zipmerge")

    def create_git(self) -> Git:
        """Create a git client for the working tree clone."""
        return Git(
            repo=self._config.repository_dir,
            user_name=self._config.git_user_name,
            user_email=self._config.git_user_email,
            logger=self._logger,
        )

    def create_gitlab_storage(self) -> GitLabStorage:
        """Create a GitLab client for the target project."""
        return GitLabStorage(
            http_client=self._http_client,
            base_url=str(self._config.gitlab_url),
            token=self._config.gitlab_token,
            project_id=self._config.project_id,
        )

    def create_importer(self) -> ArchiveImporter:
        """Create the archive importer with all of its collaborators.

        All components share one git client, since they all act on the one
        working tree.
        """
        git = self.create_git()
        workspace = WorkspacePreparer(
            repo_url=self._config.repo_url,
            base_branch=self._config.base_branch,
            git=git,
            logger=self._logger,
        )
        selector = TreeSelector(self._config.known_directories, self._logger)
        publisher = ChangePublisher(
            git=git,
            gitlab=self.create_gitlab_storage(),
            base_branch=self._config.base_branch,
            logger=self._logger,
        )
        return ArchiveImporter(
            work_dir=self._config.work_dir,
            intake_dir=self._config.intake_dir,
            base_branch=self._config.base_branch,
            branch_name_prefix=self._config.branch_name_prefix,
            git=git,
            workspace=workspace,
            selector=selector,
            publisher=publisher,
            logger=self._logger,
        )

    def create_slack_webhook_client(self) -> SlackWebhookClient | None:
        """Create a Slack webhook client if configured for Slack alerting.

        Returns
        -------
        SlackWebhookClient or None
            Newly-created Slack client, or `None` if Slack alerting is not
            configured.
        """
        if self._config.slack_alerts and self._config.alert_hook:
            return SlackWebhookClient(
                str(self._config.alert_hook), "zipmerge", self._logger
            )
        return None
