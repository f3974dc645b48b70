"""Exceptions for zipmerge."""

from __future__ import annotations

from pathlib import Path
from typing_extensions import override

from safir.slack.blockkit import (
    SlackCodeBlock,
    SlackException,
    SlackMessage,
    SlackTextField,
)

__all__ = [
    "ArchiveError",
    "MergeRequestError",
    "SubprocessError",
]


class SubprocessError(SlackException):
    """Running a subprocess failed."""

    def __init__(
        self,
        msg: str,
        *,
        returncode: int | None = None,
        stdout: str | None = None,
        stderr: str | None = None,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        super().__init__(msg)
        self.msg = msg
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.cwd = cwd
        self.env = env

    @override
    def __str__(self) -> str:
        return (
            f"{self.msg} with rc={self.returncode};"
            f" stdout='{self.stdout}'; stderr='{self.stderr}'"
            f" cwd='{self.cwd}'; env='{self.env}'"
        )

    @override
    def to_slack(self) -> SlackMessage:
        message = super().to_slack()
        message.fields.append(
            SlackTextField(heading="Return code", text=str(self.returncode))
        )
        message.fields.append(
            SlackTextField(heading="Directory", text=str(self.cwd))
        )
        if self.stdout:
            message.blocks.append(
                SlackCodeBlock(heading="stdout", code=self.stdout)
            )
        if self.stderr:
            message.blocks.append(
                SlackCodeBlock(heading="stderr", code=self.stderr)
            )
        return message


class ArchiveError(SlackException):
    """An archive could not be extracted."""

    def __init__(self, msg: str, *, archive: Path) -> None:
        super().__init__(msg)
        self.msg = msg
        self.archive = archive

    @override
    def __str__(self) -> str:
        return f"{self.msg} (archive '{self.archive}')"

    @override
    def to_slack(self) -> SlackMessage:
        message = super().to_slack()
        message.fields.append(
            SlackTextField(heading="Archive", text=self.archive.name)
        )
        return message


class MergeRequestError(SlackException):
    """Creating a merge request through the GitLab API failed."""

    def __init__(
        self,
        msg: str,
        *,
        status_code: int | None = None,
        body: object = None,
    ) -> None:
        super().__init__(msg)
        self.msg = msg
        self.status_code = status_code
        self.body = body

    @override
    def __str__(self) -> str:
        if self.status_code is None:
            return self.msg
        return f"{self.msg} with status {self.status_code}: {self.body}"
