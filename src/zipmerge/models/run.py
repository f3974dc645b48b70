"""Models for the progress and outcome of an import run."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

__all__ = ["ArchiveResult", "ImportState"]


class ImportState(StrEnum):
    """Where an import run currently is."""

    IDLE = "idle"
    PREPARING_WORKSPACE = "preparing_workspace"
    EXTRACTING = "extracting"
    SANITIZING = "sanitizing"
    SELECTING = "selecting"
    PUBLISHING = "publishing"
    RESTORING_BASE_BRANCH = "restoring_base_branch"
    DONE = "done"
    FAILED = "failed"


class ArchiveResult(BaseModel):
    """Outcome of importing one archive."""

    archive: str = Field(..., title="Archive file name")

    branch: str = Field(..., title="Branch the archive was pushed to")

    merge_request_url: str | None = Field(
        None,
        title="URL of the created merge request",
        description="`None` if the merge request could not be created.",
    )
