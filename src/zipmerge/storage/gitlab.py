"""Tools for interacting with the GitLab REST API."""

from __future__ import annotations

from urllib.parse import quote

from httpx import AsyncClient, HTTPError
from pydantic import ValidationError

from ..exceptions import MergeRequestError
from ..models.merge_request import MergeRequest, MergeRequestCreate

__all__ = ["GitLabStorage"]


class GitLabStorage:
    """Create merge requests in one GitLab project.

    Parameters
    ----------
    http_client
        Shared HTTP client.
    base_url
        Base URL of the GitLab REST API, such as
        ``https://gitlab.com/api/v4``.
    token
        Access token, sent as the ``PRIVATE-TOKEN`` header.
    project_id
        Numeric ID or namespaced path of the project.
    """

    def __init__(
        self,
        *,
        http_client: AsyncClient,
        base_url: str,
        token: str,
        project_id: str,
    ) -> None:
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._project_id = project_id

    @property
    def merge_requests_url(self) -> str:
        project = quote(self._project_id, safe="")
        return f"{self._base_url}/projects/{project}/merge_requests"

    async def create_merge_request(
        self, request: MergeRequestCreate
    ) -> MergeRequest:
        """Create a merge request.

        Parameters
        ----------
        request
            Source branch, target branch, and title.

        Returns
        -------
        MergeRequest
            The created merge request.

        Raises
        ------
        MergeRequestError
            Raised if the request could not be sent, GitLab answered with a
            non-2xx status, or the answer did not describe a merge request.
        """
        try:
            r = await self._client.post(
                self.merge_requests_url,
                json=request.model_dump(),
                headers={"PRIVATE-TOKEN": self._token},
            )
        except HTTPError as e:
            msg = f"Cannot reach GitLab: {type(e).__name__}: {e!s}"
            raise MergeRequestError(msg) from e

        if not r.is_success:
            try:
                body = r.json()
            except ValueError:
                body = r.text
            raise MergeRequestError(
                "GitLab refused to create merge request",
                status_code=r.status_code,
                body=body,
            )

        try:
            return MergeRequest.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            raise MergeRequestError(
                "Invalid merge request response from GitLab",
                status_code=r.status_code,
                body=r.text,
            ) from e
