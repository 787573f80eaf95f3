"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_COMMITTER_EMAIL,
    DEFAULT_COMMITTER_NAME,
    DEFAULT_PULL_REQUEST_TITLE,
    DEFAULT_TARGET_BRANCH,
)
from .helpers import generate_branch_name, redact_secret, resolve_target_branch

__all__ = [
    "DEFAULT_COMMIT_MESSAGE",
    "DEFAULT_COMMITTER_EMAIL",
    "DEFAULT_COMMITTER_NAME",
    "DEFAULT_PULL_REQUEST_TITLE",
    "DEFAULT_TARGET_BRANCH",
    "generate_branch_name",
    "redact_secret",
    "resolve_target_branch",
]
