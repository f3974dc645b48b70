"""Tests for the GitLab API client."""

from __future__ import annotations

import httpx
import pytest
import respx
from httpx import AsyncClient

from zipmerge.exceptions import MergeRequestError
from zipmerge.models.merge_request import MergeRequestCreate
from zipmerge.storage.gitlab import GitLabStorage

from ..support.constants import (
    TEST_GITLAB_TOKEN,
    TEST_GITLAB_URL,
    TEST_PROJECT_ID,
)
from ..support.gitlab import MockGitLab


def _storage(
    client: AsyncClient, project_id: str = TEST_PROJECT_ID
) -> GitLabStorage:
    return GitLabStorage(
        http_client=client,
        base_url=TEST_GITLAB_URL,
        token=TEST_GITLAB_TOKEN,
        project_id=project_id,
    )


def test_url_encodes_project_path() -> None:
    storage = _storage(AsyncClient(), "group/sub group/project")
    assert storage.merge_requests_url == (
        f"{TEST_GITLAB_URL}/projects/group%2Fsub%20group%2Fproject"
        "/merge_requests"
    )


def test_url_trailing_slash() -> None:
    storage = GitLabStorage(
        http_client=AsyncClient(),
        base_url=f"{TEST_GITLAB_URL}/",
        token=TEST_GITLAB_TOKEN,
        project_id="7",
    )
    assert storage.merge_requests_url == (
        f"{TEST_GITLAB_URL}/projects/7/merge_requests"
    )


@pytest.mark.asyncio
async def test_create(gitlab: MockGitLab) -> None:
    request = MergeRequestCreate.for_branch("script-branch-release-1", "main")
    async with AsyncClient() as client:
        mr = await _storage(client).create_merge_request(request)

    assert mr.iid == 1
    assert mr.web_url == gitlab.web_url(1)
    assert gitlab.requests == [
        {
            "source_branch": "script-branch-release-1",
            "target_branch": "main",
            "title": "Merge script-branch-release-1 into main",
        }
    ]


@pytest.mark.asyncio
async def test_rejected(gitlab: MockGitLab) -> None:
    gitlab.fail_branches.add("import-a")
    request = MergeRequestCreate.for_branch("import-a", "main")
    async with AsyncClient() as client:
        with pytest.raises(MergeRequestError) as excinfo:
            await _storage(client).create_merge_request(request)

    assert excinfo.value.status_code == 409
    assert excinfo.value.body == {
        "message": ["Another open merge request exists"]
    }


@pytest.mark.asyncio
async def test_non_json_error(respx_mock: respx.Router) -> None:
    url = f"{TEST_GITLAB_URL}/projects/{TEST_PROJECT_ID}/merge_requests"
    respx_mock.post(url).respond(502, text="Bad Gateway")
    request = MergeRequestCreate.for_branch("import-a", "main")
    async with AsyncClient() as client:
        with pytest.raises(MergeRequestError) as excinfo:
            await _storage(client).create_merge_request(request)

    assert excinfo.value.status_code == 502
    assert excinfo.value.body == "Bad Gateway"


@pytest.mark.asyncio
async def test_missing_web_url(respx_mock: respx.Router) -> None:
    url = f"{TEST_GITLAB_URL}/projects/{TEST_PROJECT_ID}/merge_requests"
    respx_mock.post(url).respond(201, json={"iid": 3})
    request = MergeRequestCreate.for_branch("import-a", "main")
    async with AsyncClient() as client:
        with pytest.raises(MergeRequestError):
            await _storage(client).create_merge_request(request)


@pytest.mark.asyncio
async def test_network_error(respx_mock: respx.Router) -> None:
    url = f"{TEST_GITLAB_URL}/projects/{TEST_PROJECT_ID}/merge_requests"
    respx_mock.post(url).mock(side_effect=httpx.ConnectError("refused"))
    request = MergeRequestCreate.for_branch("import-a", "main")
    async with AsyncClient() as client:
        with pytest.raises(MergeRequestError) as excinfo:
            await _storage(client).create_merge_request(request)

    assert excinfo.value.status_code is None
    assert "ConnectError" in str(excinfo.value)


@pytest.mark.asyncio
async def test_timeout(respx_mock: respx.Router) -> None:
    url = f"{TEST_GITLAB_URL}/projects/{TEST_PROJECT_ID}/merge_requests"
    respx_mock.post(url).mock(side_effect=httpx.ReadTimeout("slow"))
    request = MergeRequestCreate.for_branch("import-a", "main")
    async with AsyncClient() as client:
        with pytest.raises(MergeRequestError) as excinfo:
            await _storage(client).create_merge_request(request)

    assert excinfo.value.status_code is None
    assert "ReadTimeout" in str(excinfo.value)
