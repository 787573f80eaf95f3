"""GitHub provider backed by the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import GitHub, Response
from githubkit.auth import TokenAuthStrategy
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import MinimalRepository, PullRequest, PullRequestSimple, Repository

from boneclone.providers.abc import ChangeRequestProviderBase, RepositoryProviderBase
from boneclone.schemas.config import ProviderConfig
from boneclone.synchronize.models import ChangeRequestHandle, RepositoryRef
from boneclone.synchronize.types import BodyBuilder
from boneclone.utils.constants import DEFAULT_GITHUB_API_URL, PROVIDER_PAGE_SIZE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code == 422:
                try:
                    error_data = exc.response.json()
                except ValueError:
                    error_data = {}
                message = error_data.get("message", "Unprocessable Entity")
                errors = error_data.get("errors", [])
                logger.error(
                    "GitHub 422 Unprocessable Entity",
                    function=func.__name__,
                    message=message,
                    errors=errors,
                    status_code=422,
                )
                raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors}") from exc
            raise

    return wrapper  # type: ignore


def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns an authenticated GitHub client using a personal access token."""
    if not github_pat_token:
        raise ValueError("GitHub provider requires a token in config.")
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


class GitHubProvider(RepositoryProviderBase, ChangeRequestProviderBase):
    """Discovers repositories in a GitHub organization and opens pull requests against them.

    When no organization is configured, the repositories owned by the
    authenticated user are listed instead.
    """

    def __init__(self, client: GitHub[TokenAuthStrategy], org: str, username: str = "") -> None:
        """Initialize the provider with an already-initialized client."""
        self.client = client
        self.org = org.strip()
        self.owner = self.org or username.strip()

    @classmethod
    def create(cls, provider_config: ProviderConfig) -> Self:
        """Create a GitHub provider from a provider entry."""
        if not (provider_config.org.strip() or provider_config.username.strip()):
            raise ValueError("GitHub provider requires an org or a username in config.")
        github_api_url = provider_config.url or DEFAULT_GITHUB_API_URL
        logger.info("Creating client for GitHub instance", github_api_url=github_api_url, org=provider_config.org)
        client = get_github_pat_client(provider_config.token, github_api_url)
        return cls(client, provider_config.org, provider_config.username)

    async def _list_page(self, page: int) -> list[MinimalRepository] | list[Repository]:
        """Fetch one page of repositories for the organization or the authenticated user."""
        if self.org:
            org_response: Response[list[MinimalRepository]] = await self.client.rest.repos.async_list_for_org(
                org=self.org,
                per_page=PROVIDER_PAGE_SIZE,
                page=page,
            )
            return org_response.parsed_data
        user_response: Response[list[Repository]] = await self.client.rest.repos.async_list_for_authenticated_user(
            affiliation="owner",
            per_page=PROVIDER_PAGE_SIZE,
            page=page,
        )
        return user_response.parsed_data

    async def list_repositories(self) -> list[RepositoryRef]:
        """List all repositories, handling pagination."""
        output: list[RepositoryRef] = []
        page: int = 1
        while True:
            repositories = await self._list_page(page)
            if not repositories:
                break
            for repository in repositories:
                clone_url = repository.clone_url if isinstance(repository.clone_url, str) else f"{repository.html_url}.git"
                output.append(RepositoryRef(name=repository.name, url=clone_url))
            if len(repositories) < PROVIDER_PAGE_SIZE:
                break
            page += 1
        logger.info("Listed GitHub repositories", owner=self.owner, repository_count=len(output))
        return output

    @handle_github_422
    async def open_change_request(
        self,
        repo: str,
        base_branch: str,
        head_branch: str,
        title: str,
        body_builder: BodyBuilder | None = None,
        files_changed: list[str] | None = None,
        original_author: str | None = None,
        skeleton_name: str = "",
    ) -> ChangeRequestHandle:
        """Open a pull request from head_branch into base_branch."""
        body = self.render_body(body_builder, repo, base_branch, head_branch, files_changed, original_author, skeleton_name)
        response: Response[PullRequest] = await self.client.rest.pulls.async_create(
            owner=self.owner,
            repo=repo,
            title=title,
            head=head_branch,
            base=base_branch,
            body=body,
        )
        pull_request = response.parsed_data
        logger.info("Created GitHub pull request", repo=repo, number=pull_request.number, url=pull_request.html_url)
        return ChangeRequestHandle(id=pull_request.number, url=pull_request.html_url)

    @handle_github_422
    async def assign_reviewers(self, repo: str, handle: ChangeRequestHandle, reviewers: list[str]) -> None:
        """Request reviews from the given GitHub usernames."""
        reviewers = [reviewer.strip() for reviewer in reviewers if reviewer.strip()]
        if not reviewers:
            return
        response: Response[PullRequestSimple] = await self.client.rest.pulls.async_request_reviewers(
            owner=self.owner,
            repo=repo,
            pull_number=handle.id,
            reviewers=reviewers,
        )
        logger.debug("Requested GitHub reviewers", repo=repo, number=response.parsed_data.number, reviewers=reviewers)
