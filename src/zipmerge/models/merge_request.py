"""Models for the GitLab merge request API."""

from __future__ import annotations

from pydantic import BaseModel, Field

__all__ = ["MergeRequest", "MergeRequestCreate"]


class MergeRequestCreate(BaseModel):
    """Body of a request to create a merge request."""

    source_branch: str = Field(..., title="Branch with the changes")

    target_branch: str = Field(..., title="Branch to merge into")

    title: str = Field(..., title="Merge request title")

    @classmethod
    def for_branch(cls, branch: str, base_branch: str) -> MergeRequestCreate:
        """Build the request merging ``branch`` into ``base_branch``."""
        return cls(
            source_branch=branch,
            target_branch=base_branch,
            title=f"Merge {branch} into {base_branch}",
        )


class MergeRequest(BaseModel):
    """The parts of a created merge request that zipmerge uses."""

    iid: int | None = Field(
        None, title="Project-scoped merge request number"
    )

    web_url: str = Field(..., title="URL of the merge request in the UI")
