"""Global constants for zipmerge."""

from __future__ import annotations

__all__ = [
    "ARCHIVE_SUFFIX",
    "BASE_BRANCH",
    "BRANCH_NAME_PREFIX",
    "GITLAB_URL",
    "HTTP_TIMEOUT",
    "INTAKE_DIR",
    "KNOWN_DIRECTORIES_SEPARATOR",
    "REMOTE_NAME",
    "REPOSITORY_DIR",
    "VCS_METADATA_DIR",
]

ARCHIVE_SUFFIX = ".zip"
"""Suffix of files in the intake directory that are imported."""

BASE_BRANCH = "main"
"""Default branch that all merge requests target."""

BRANCH_NAME_PREFIX = "script-branch"
"""Default prefix of generated branch names."""

GITLAB_URL = "https://gitlab.com/api/v4"
"""Default base URL of the GitLab REST API."""

HTTP_TIMEOUT = 30
"""How long in seconds to wait for the merge request API call."""

INTAKE_DIR = "zips"
"""Name of the directory, under the work directory, holding archives."""

KNOWN_DIRECTORIES_SEPARATOR = ";"
"""Separator between directory names in ``KNOWN_DIRECTORIES``."""

REMOTE_NAME = "origin"
"""Name of the git remote that branches are pushed to."""

REPOSITORY_DIR = "repository"
"""Name of the directory, under the work directory, holding the clone."""

VCS_METADATA_DIR = ".git"
"""Directory name stripped from extracted archives before copying."""
