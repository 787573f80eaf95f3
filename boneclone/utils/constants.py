"""Shared constants used across the application."""

# Configuration Defaults
# ----------------------

DEFAULT_CONFIG_PATH = "boneclone.yaml"
"""Default path of the configuration file passed to the run command."""

DEFAULT_IDENTIFIER_FILENAME = ".boneclone.yaml"
"""Default path of the eligibility descriptor inside target repositories."""

# Git Defaults
# ------------

DEFAULT_COMMITTER_NAME = "boneclone"
DEFAULT_COMMITTER_EMAIL = "boneclone@example.org"

DEFAULT_COMMIT_MESSAGE = "Updated via boneclone"

DEFAULT_TARGET_BRANCH = "main"
"""Branch that changes land on (or that pull requests target) when none is configured."""

CLONE_DEPTH = 1

REMOTE_NAME = "origin"

# Pull Request Defaults
# ---------------------

PULL_REQUEST_BRANCH_PREFIX = "boneclone/update"
"""Prefix of head branches created for pull requests, followed by a UTC timestamp."""

PULL_REQUEST_BRANCH_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

DEFAULT_PULL_REQUEST_TITLE = "BoneClone update"

CHANGE_REQUEST_BODY_TEMPLATE = "change_request_body.j2"

# Provider Defaults
# -----------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITLAB_URL = "https://gitlab.com"
DEFAULT_AZURE_DEVOPS_URL = "https://dev.azure.com"
AZURE_DEVOPS_API_VERSION = "7.1"

PROVIDER_PAGE_SIZE = 100
PROVIDER_HTTP_TIMEOUT = 30.0
