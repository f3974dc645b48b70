"""Test fixtures for zipmerge tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
import respx
import structlog
from safir.logging import LogLevel, Profile, configure_logging
from safir.testing.slack import MockSlackWebhook, mock_slack_webhook
from structlog.stdlib import BoundLogger

from zipmerge.config import Configuration

from .support.constants import (
    TEST_ALERT_HOOK,
    TEST_GITLAB_TOKEN,
    TEST_GITLAB_URL,
    TEST_PROJECT_ID,
)
from .support.git import setup_remote_repo
from .support.gitlab import MockGitLab, mock_gitlab

_CONFIG_VARIABLES = (
    "REPO_URL",
    "BASE_BRANCH",
    "GITLAB_TOKEN",
    "GITLAB_PROJECT_ID",
    "BRANCH_NAME_PREFIX",
    "KNOWN_DIRECTORIES",
    "ZIPMERGE_ALERT_HOOK",
    "ZIPMERGE_CONFIG_PATH",
    "ZIPMERGE_GITLAB_URL",
    "ZIPMERGE_GIT_USER_EMAIL",
    "ZIPMERGE_GIT_USER_NAME",
    "ZIPMERGE_HTTP_TIMEOUT",
    "ZIPMERGE_LOG_LEVEL",
    "ZIPMERGE_PROFILE",
    "ZIPMERGE_SLACK_ALERTS",
    "ZIPMERGE_WORK_DIR",
)


@pytest.fixture(autouse=True)
def _environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Isolate tests from the developer's configuration.

    This clears every zipmerge setting from the environment and points git
    at an empty global configuration with a fixed commit identity.
    """
    for variable in _CONFIG_VARIABLES:
        monkeypatch.delenv(variable, raising=False)

    gitconfig = tmp_path_factory.mktemp("git") / "gitconfig"
    gitconfig.write_text("[init]\n\tdefaultBranch = main\n")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


@pytest.fixture
def logger() -> BoundLogger:
    configure_logging(
        name="zipmerge",
        profile=Profile.development,
        log_level=LogLevel.DEBUG,
    )
    return structlog.get_logger("zipmerge")


@pytest_asyncio.fixture
async def remote(tmp_path: Path) -> Path:
    """Bare repository standing in for the GitLab remote."""
    return await setup_remote_repo(
        tmp_path / "remote.git",
        {"README.md": "# Reports\n", "Q1/existing.txt": "old\n"},
    )


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def config(remote: Path, work_dir: Path) -> Configuration:
    return Configuration(
        repo_url=str(remote),
        gitlab_token=TEST_GITLAB_TOKEN,
        project_id=TEST_PROJECT_ID,
        known_directories=["Q1"],
        gitlab_url=TEST_GITLAB_URL,
        work_dir=work_dir,
        git_user_name="zipmerge",
        git_user_email="zipmerge@example.com",
    )


@pytest.fixture
def gitlab(respx_mock: respx.Router) -> MockGitLab:
    return mock_gitlab(respx_mock)


@pytest.fixture
def slack(respx_mock: respx.Router) -> MockSlackWebhook:
    return mock_slack_webhook(TEST_ALERT_HOOK, respx_mock)
