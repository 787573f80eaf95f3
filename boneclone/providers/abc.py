"""Base ABCs for source-control providers."""

from abc import ABC, abstractmethod
from typing import Any, TypeGuard

from boneclone.synchronize.models import ChangeRequestBodyContext, ChangeRequestHandle, RepositoryRef
from boneclone.synchronize.types import BodyBuilder


class RepositoryProviderBase(ABC):
    """Minimum capability every provider offers: discovering repositories."""

    @abstractmethod
    async def list_repositories(self) -> list[RepositoryRef]:
        """List every repository the configured credentials can see in the org or group."""
        pass

    async def aclose(self) -> None:
        """Release any HTTP resources held by the provider."""
        return None


class ChangeRequestProviderBase(ABC):
    """Optional capability: opening change requests and assigning reviewers."""

    @abstractmethod
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
        """Open a change request merging head_branch into base_branch."""
        pass

    @abstractmethod
    async def assign_reviewers(self, repo: str, handle: ChangeRequestHandle, reviewers: list[str]) -> None:
        """Request reviews from the given usernames on an existing change request."""
        pass

    @staticmethod
    def render_body(
        body_builder: BodyBuilder | None,
        repo: str,
        base_branch: str,
        head_branch: str,
        files_changed: list[str] | None,
        original_author: str | None,
        skeleton_name: str,
    ) -> str:
        """Build the change request description, or an empty one when no builder is given."""
        if body_builder is None:
            return ""
        context = ChangeRequestBodyContext(
            skeleton_name=skeleton_name,
            repository=repo,
            base_branch=base_branch,
            head_branch=head_branch,
            files_changed=files_changed or [],
            original_author=original_author,
        )
        return body_builder(context)


def supports_change_requests(provider: Any) -> TypeGuard[ChangeRequestProviderBase]:
    """Return whether a provider can open change requests."""
    return isinstance(provider, ChangeRequestProviderBase)
