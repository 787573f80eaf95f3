"""General utility functions and helper classes."""

from datetime import datetime, timezone
from urllib.parse import quote

from boneclone.utils.constants import DEFAULT_TARGET_BRANCH, PULL_REQUEST_BRANCH_PREFIX, PULL_REQUEST_BRANCH_TIMESTAMP_FORMAT


def generate_branch_name(now: datetime | None = None, prefix: str = PULL_REQUEST_BRANCH_PREFIX) -> str:
    """Generate a pull request head branch name like 'boneclone/update-20250101120000'."""
    if now is None:
        now = datetime.now(timezone.utc)
    return f"{prefix}-{now.astimezone(timezone.utc).strftime(PULL_REQUEST_BRANCH_TIMESTAMP_FORMAT)}"


def resolve_target_branch(target_branch: str | None) -> str:
    """Return the configured target branch, falling back to the default branch."""
    if target_branch is None or not target_branch.strip():
        return DEFAULT_TARGET_BRANCH
    return target_branch.strip()


def redact_secret(text: str, secret: str | None) -> str:
    """Replace every occurrence of a secret (raw or URL-encoded) in text."""
    if not secret:
        return text
    for variant in {secret, quote(secret, safe="")}:
        text = text.replace(variant, "***")
    return text
