"""GitLab provider talking to the GitLab REST API (v4) over httpx."""

from typing import Any, Self
from urllib.parse import quote

import httpx
import structlog

from boneclone.providers.abc import ChangeRequestProviderBase, RepositoryProviderBase
from boneclone.schemas.config import ProviderConfig
from boneclone.synchronize.models import ChangeRequestHandle, RepositoryRef
from boneclone.synchronize.types import BodyBuilder
from boneclone.utils.constants import DEFAULT_GITLAB_URL, PROVIDER_HTTP_TIMEOUT, PROVIDER_PAGE_SIZE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitLabProvider(RepositoryProviderBase, ChangeRequestProviderBase):
    """Discovers projects in a GitLab group (including subgroups) and opens merge requests."""

    def __init__(self, client: httpx.AsyncClient, group: str) -> None:
        """Initialize the provider with an already-initialized HTTP client."""
        self.client = client
        self.group = group

    @classmethod
    def create(cls, provider_config: ProviderConfig) -> Self:
        """Create a GitLab provider from a provider entry."""
        if not provider_config.token:
            raise ValueError("GitLab provider requires a token in config.")
        if not provider_config.org:
            raise ValueError("GitLab provider requires the group in org.")
        gitlab_url = (provider_config.url or DEFAULT_GITLAB_URL).rstrip("/")
        logger.info("Creating client for GitLab instance", gitlab_url=gitlab_url, group=provider_config.org)
        client = httpx.AsyncClient(
            base_url=f"{gitlab_url}/api/v4",
            headers={"PRIVATE-TOKEN": provider_config.token},
            timeout=PROVIDER_HTTP_TIMEOUT,
        )
        return cls(client, provider_config.org)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def _project_path(self, repo: str) -> str:
        """Return the URL-encoded '<group>/<repo>' project identifier."""
        return quote(f"{self.group}/{repo}", safe="")

    def _repository_name(self, project: dict[str, Any]) -> str:
        """Return the project path relative to the group, e.g. 'team/svc' for 'platform/team/svc'."""
        full_path = project.get("path_with_namespace") or f"{self.group}/{project['path']}"
        prefix = f"{self.group}/"
        if full_path.lower().startswith(prefix.lower()):
            return full_path[len(prefix) :]
        return project["path"]

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise for error responses."""
        response = await self.client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    async def list_repositories(self) -> list[RepositoryRef]:
        """List all projects in the group and its subgroups, following X-Next-Page."""
        output: list[RepositoryRef] = []
        page = "1"
        while page:
            response = await self._request(
                "GET",
                f"/groups/{quote(self.group, safe='')}/projects",
                params={"include_subgroups": "true", "per_page": PROVIDER_PAGE_SIZE, "page": page},
            )
            for project in response.json():
                output.append(RepositoryRef(name=self._repository_name(project), url=project["http_url_to_repo"]))
            page = response.headers.get("X-Next-Page", "")
        logger.info("Listed GitLab projects", group=self.group, repository_count=len(output))
        return output

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
        """Open a merge request from head_branch into base_branch."""
        body = self.render_body(body_builder, repo, base_branch, head_branch, files_changed, original_author, skeleton_name)
        response = await self._request(
            "POST",
            f"/projects/{self._project_path(repo)}/merge_requests",
            json={
                "source_branch": head_branch,
                "target_branch": base_branch,
                "title": title,
                "description": body,
            },
        )
        merge_request = response.json()
        logger.info("Created GitLab merge request", repo=repo, iid=merge_request["iid"], url=merge_request.get("web_url"))
        return ChangeRequestHandle(id=merge_request["iid"], url=merge_request.get("web_url", ""))

    async def _resolve_user_id(self, username: str) -> int:
        """Look up the numeric id of a GitLab user."""
        response = await self._request("GET", "/users", params={"username": username})
        users = response.json()
        if not users:
            raise ValueError(f"GitLab user not found: {username}")
        return int(users[0]["id"])

    async def assign_reviewers(self, repo: str, handle: ChangeRequestHandle, reviewers: list[str]) -> None:
        """Add reviewers to a merge request, keeping the reviewers already assigned.

        GitLab replaces the reviewer list on update, so the current reviewers
        are read first and merged with the new ones.
        """
        usernames = [reviewer.strip() for reviewer in reviewers if reviewer.strip()]
        if not usernames:
            return
        new_ids = [await self._resolve_user_id(username) for username in usernames]

        merge_request_url = f"/projects/{self._project_path(repo)}/merge_requests/{handle.id}"
        current = await self._request("GET", merge_request_url)
        reviewer_ids = [int(reviewer["id"]) for reviewer in current.json().get("reviewers") or []]
        for reviewer_id in new_ids:
            if reviewer_id not in reviewer_ids:
                reviewer_ids.append(reviewer_id)

        await self._request("PUT", merge_request_url, json={"reviewer_ids": reviewer_ids})
        logger.debug("Assigned GitLab reviewers", repo=repo, iid=handle.id, reviewers=usernames)
