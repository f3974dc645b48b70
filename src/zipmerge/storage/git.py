"""A very simple async git client.

Every command runs as a subprocess with its working directory set to the
repository, so the working directory of zipmerge itself is never changed.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from shlex import join

from structlog.stdlib import BoundLogger

from ..exceptions import SubprocessError

__all__ = ["Git"]


class Git:
    """A very basic async Git client based on asyncio.subprocess.

    Parameters
    ----------
    repo
        Filesystem path for the git repository.
    user_name
        If set, author and committer name for commits.
    user_email
        If set, author and committer email for commits.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        repo: Path | None = None,
        user_name: str | None = None,
        user_email: str | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self.repo = repo
        self._user_name = user_name
        self._user_email = user_email
        self._logger = logger

    async def _exec(
        self,
        cmd: str,
        *args: str,
        env: dict[str, str] | None = None,
        cwd: Path | None = None,
    ) -> str:
        """Execute a non-interactive subprocess and return its output.

        The environment is logged if debugging is turned on and attached to
        the exception on failure, so it's important not to put any secrets
        into it.
        """
        l_args = [cmd]
        l_args.extend(args)
        cmd_and_args = join(l_args)

        proc = await asyncio.subprocess.create_subprocess_exec(
            cmd,
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
        stdout, stderr = await proc.communicate()  # Waits for process exit

        stdout_text = stdout.decode() if stdout else ""
        stderr_text = stderr.decode() if stderr else ""
        if proc.returncode != 0:
            raise SubprocessError(
                f"Subprocess '{cmd_and_args}' failed",
                returncode=proc.returncode,
                stdout=stdout_text,
                stderr=stderr_text,
                cwd=cwd,
                env=env,
            )
        if self._logger:
            self._logger.debug(
                f"'{cmd_and_args}' exited",
                returncode=proc.returncode,
                stdout=stdout_text,
                stderr=stderr_text,
                cwd=str(cwd),
            )
        return stdout_text

    async def git(self, *args: str) -> str:
        """Run an arbitrary git command with arbitrary string arguments.

        Constrain the environment of the subprocess: only pass HOME, LANG,
        PATH, and any GIT_ variables, plus the commit identity if one was
        configured.  If self.repo is set, use that as the working directory.
        """
        env = {
            "PATH": os.environ.get("PATH", "/bin:/usr/bin"),
            "HOME": os.environ.get("HOME", "/"),
            "LANG": os.environ.get("LANG", "C.UTF-8"),
        }
        for var in os.environ:
            if var.startswith("GIT_"):
                env[var] = os.environ[var]
        if self._user_name:
            env["GIT_AUTHOR_NAME"] = self._user_name
            env["GIT_COMMITTER_NAME"] = self._user_name
        if self._user_email:
            env["GIT_AUTHOR_EMAIL"] = self._user_email
            env["GIT_COMMITTER_EMAIL"] = self._user_email

        return await self._exec("git", *args, cwd=self.repo, env=env)

    async def init(self, *args: str) -> None:
        """Run `git init` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("init", *args)

    async def clone(self, *args: str) -> None:
        """Run `git clone` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("clone", *args)

    async def fetch(self, *args: str) -> None:
        """Run `git fetch` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("fetch", *args)

    async def checkout(self, *args: str) -> None:
        """Run `git checkout` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("checkout", *args)

    async def add(self, *args: str) -> None:
        """Run `git add` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("add", *args)

    async def commit(self, *args: str) -> None:
        """Run `git commit` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("commit", *args)

    async def push(self, *args: str) -> None:
        """Run `git push` with arbitrary arguments.

        Parameters
        ----------
        *args
            Arguments to command.
        """
        await self.git("push", *args)

    async def current_branch(self) -> str:
        """Return the name of the checked-out branch."""
        output = await self.git("rev-parse", "--abbrev-ref", "HEAD")
        return output.strip()
