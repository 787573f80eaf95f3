"""Azure DevOps provider talking to the Azure DevOps REST API over httpx."""

from typing import Any, Self
from urllib.parse import quote

import httpx
import structlog

from boneclone.providers.abc import ChangeRequestProviderBase, RepositoryProviderBase
from boneclone.schemas.config import ProviderConfig
from boneclone.synchronize.models import ChangeRequestHandle, RepositoryRef
from boneclone.synchronize.types import BodyBuilder
from boneclone.utils.constants import AZURE_DEVOPS_API_VERSION, DEFAULT_AZURE_DEVOPS_URL, PROVIDER_HTTP_TIMEOUT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

CONTINUATION_TOKEN_HEADER = "x-ms-continuationtoken"


def resolve_organization_url(provider_config: ProviderConfig) -> str:
    """Return the organization URL from url, or from org as a URL or bare organization name."""
    if provider_config.url:
        return provider_config.url.rstrip("/")
    if provider_config.org.startswith(("http://", "https://")):
        return provider_config.org.rstrip("/")
    return f"{DEFAULT_AZURE_DEVOPS_URL}/{provider_config.org}"


def split_project_repository(repo: str) -> tuple[str, str] | None:
    """Split an Azure repository name of the form 'Project/Repository'."""
    parts = repo.split("/", 1)
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


class AzureProvider(RepositoryProviderBase, ChangeRequestProviderBase):
    """Discovers repositories across all projects of an Azure DevOps organization.

    Repositories are named '<project>/<repository>' so that pull request
    operations can recover the project they belong to.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Initialize the provider with an already-initialized HTTP client."""
        self.client = client

    @classmethod
    def create(cls, provider_config: ProviderConfig) -> Self:
        """Create an Azure DevOps provider from a provider entry."""
        if not provider_config.token:
            raise ValueError("Azure DevOps provider requires a token in config.")
        if not (provider_config.org or provider_config.url):
            raise ValueError("Azure DevOps provider requires the organization in org or url.")
        organization_url = resolve_organization_url(provider_config)
        logger.info("Creating client for Azure DevOps organization", organization_url=organization_url)
        client = httpx.AsyncClient(
            base_url=organization_url,
            auth=httpx.BasicAuth("", provider_config.token),
            params={"api-version": AZURE_DEVOPS_API_VERSION},
            timeout=PROVIDER_HTTP_TIMEOUT,
        )
        return cls(client)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise for error responses."""
        response = await self.client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    async def _list_projects(self) -> list[str]:
        """List project names, following continuation tokens."""
        projects: list[str] = []
        continuation_token: str | None = None
        while True:
            params = {"continuationToken": continuation_token} if continuation_token else None
            response = await self._request("GET", "/_apis/projects", params=params)
            projects.extend(project["name"] for project in response.json().get("value", []))
            continuation_token = response.headers.get(CONTINUATION_TOKEN_HEADER)
            if not continuation_token:
                return projects

    async def list_repositories(self) -> list[RepositoryRef]:
        """List every repository of every project in the organization."""
        output: list[RepositoryRef] = []
        for project in await self._list_projects():
            response = await self._request(
                "GET",
                f"/{quote(project, safe='')}/_apis/git/repositories",
                params={"includeHidden": "true", "includeAllUrls": "true"},
            )
            for repository in response.json().get("value", []):
                output.append(RepositoryRef(name=f"{project}/{repository['name']}", url=repository["remoteUrl"]))
        logger.info("Listed Azure DevOps repositories", repository_count=len(output))
        return output

    def _pull_requests_url(self, project: str, repository: str) -> str:
        """Return the pull requests collection URL for a repository."""
        return f"/{quote(project, safe='')}/_apis/git/repositories/{quote(repository, safe='')}/pullrequests"

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
        """Open a pull request from head_branch into base_branch.

        Raises:
            ValueError: If repo is not of the form 'Project/Repository'.
        """
        split = split_project_repository(repo)
        if split is None:
            raise ValueError(f"azure repo must be 'Project/Repository', got: {repo}")
        project, repository = split

        body = self.render_body(body_builder, repo, base_branch, head_branch, files_changed, original_author, skeleton_name)
        response = await self._request(
            "POST",
            self._pull_requests_url(project, repository),
            json={
                "sourceRefName": f"refs/heads/{head_branch}",
                "targetRefName": f"refs/heads/{base_branch}",
                "title": title,
                "description": body,
            },
        )
        pull_request = response.json()
        handle = ChangeRequestHandle(id=int(pull_request.get("pullRequestId", 0)), url=pull_request.get("url", ""))
        logger.info("Created Azure DevOps pull request", repo=repo, id=handle.id, url=handle.url)
        return handle

    async def assign_reviewers(self, repo: str, handle: ChangeRequestHandle, reviewers: list[str]) -> None:
        """Add reviewers by unique name (email or UPN).

        Repository names that are not of the form 'Project/Repository' are
        ignored rather than treated as failures.
        """
        identities = [{"uniqueName": reviewer.strip()} for reviewer in reviewers if reviewer.strip()]
        if not identities:
            return
        split = split_project_repository(repo)
        if split is None:
            logger.warning("Skipping reviewer assignment for malformed Azure repository name", repo=repo)
            return
        project, repository = split
        await self._request("POST", f"{self._pull_requests_url(project, repository)}/{handle.id}/reviewers", json=identities)
        logger.debug("Assigned Azure DevOps reviewers", repo=repo, id=handle.id, reviewers=[identity["uniqueName"] for identity in identities])
