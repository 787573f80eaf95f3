"""Unit tests for the GitHub provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from boneclone.providers.github import GitHubProvider
from boneclone.schemas.config import ProviderConfig
from boneclone.synchronize.models import ChangeRequestBodyContext, ChangeRequestHandle, RepositoryRef
from boneclone.utils.constants import PROVIDER_PAGE_SIZE


def make_repository(name: str) -> SimpleNamespace:
    """Return an object shaped like a githubkit repository model."""
    return SimpleNamespace(name=name, clone_url=f"https://github.com/acme/{name}.git", html_url=f"https://github.com/acme/{name}")


@pytest.mark.asyncio
async def test_list_repositories_for_org_paginates() -> None:
    """Test that organization repositories are listed across pages."""
    provider = GitHubProvider(MagicMock(), "acme")
    first_page = [make_repository(f"repo{i}") for i in range(PROVIDER_PAGE_SIZE)]
    second_page = [make_repository("last")]
    provider.client.rest.repos.async_list_for_org = AsyncMock(
        side_effect=[SimpleNamespace(parsed_data=first_page), SimpleNamespace(parsed_data=second_page)]
    )

    repositories = await provider.list_repositories()

    assert len(repositories) == PROVIDER_PAGE_SIZE + 1
    assert repositories[-1] == RepositoryRef("last", "https://github.com/acme/last.git")
    assert provider.client.rest.repos.async_list_for_org.await_count == 2
    assert provider.client.rest.repos.async_list_for_org.await_args_list[1].kwargs["page"] == 2


@pytest.mark.asyncio
async def test_list_repositories_for_user_without_org() -> None:
    """Test that the authenticated user's repositories are listed when no org is set."""
    provider = GitHubProvider(MagicMock(), "", username="octocat")
    provider.client.rest.repos.async_list_for_authenticated_user = AsyncMock(return_value=SimpleNamespace(parsed_data=[make_repository("mine")]))

    repositories = await provider.list_repositories()

    assert repositories == [RepositoryRef("mine", "https://github.com/acme/mine.git")]
    kwargs = provider.client.rest.repos.async_list_for_authenticated_user.await_args.kwargs
    assert kwargs["affiliation"] == "owner"
    assert provider.owner == "octocat"


@pytest.mark.asyncio
async def test_list_repositories_falls_back_to_html_url() -> None:
    """Test that the clone URL is derived from the HTML URL when missing."""
    provider = GitHubProvider(MagicMock(), "acme")
    repository = SimpleNamespace(name="odd", clone_url=None, html_url="https://github.com/acme/odd")
    provider.client.rest.repos.async_list_for_org = AsyncMock(return_value=SimpleNamespace(parsed_data=[repository]))

    repositories = await provider.list_repositories()

    assert repositories == [RepositoryRef("odd", "https://github.com/acme/odd.git")]


@pytest.mark.asyncio
async def test_open_change_request() -> None:
    """Test opening a pull request with a rendered body."""
    provider = GitHubProvider(MagicMock(), "acme")
    provider.client.rest.pulls.async_create = AsyncMock(
        return_value=SimpleNamespace(parsed_data=SimpleNamespace(number=12, html_url="https://github.com/acme/service/pull/12"))
    )
    contexts: list[ChangeRequestBodyContext] = []

    def body_builder(context: ChangeRequestBodyContext) -> str:
        contexts.append(context)
        return "rendered body"

    handle = await provider.open_change_request(
        "service",
        "main",
        "boneclone/update-20250101000000",
        "base update",
        body_builder=body_builder,
        files_changed=["ci/build.sh"],
        skeleton_name="base",
    )

    assert handle == ChangeRequestHandle(id=12, url="https://github.com/acme/service/pull/12")
    kwargs = provider.client.rest.pulls.async_create.await_args.kwargs
    assert kwargs == {
        "owner": "acme",
        "repo": "service",
        "title": "base update",
        "head": "boneclone/update-20250101000000",
        "base": "main",
        "body": "rendered body",
    }
    assert contexts[0].files_changed == ["ci/build.sh"]
    assert contexts[0].skeleton_name == "base"


@pytest.mark.asyncio
async def test_open_change_request_without_body_builder() -> None:
    """Test that the body is empty when no builder is given."""
    provider = GitHubProvider(MagicMock(), "acme")
    provider.client.rest.pulls.async_create = AsyncMock(return_value=SimpleNamespace(parsed_data=SimpleNamespace(number=1, html_url="u")))
    await provider.open_change_request("service", "main", "head", "title")
    assert provider.client.rest.pulls.async_create.await_args.kwargs["body"] == ""


@pytest.mark.asyncio
async def test_assign_reviewers() -> None:
    """Test requesting reviewers on a pull request."""
    provider = GitHubProvider(MagicMock(), "acme")
    provider.client.rest.pulls.async_request_reviewers = AsyncMock(return_value=SimpleNamespace(parsed_data=SimpleNamespace(number=12)))

    await provider.assign_reviewers("service", ChangeRequestHandle(id=12, url="u"), ["alice", " "])

    kwargs = provider.client.rest.pulls.async_request_reviewers.await_args.kwargs
    assert kwargs == {"owner": "acme", "repo": "service", "pull_number": 12, "reviewers": ["alice"]}


@pytest.mark.asyncio
async def test_assign_reviewers_empty_list_is_noop() -> None:
    """Test that no request is made without reviewers."""
    provider = GitHubProvider(MagicMock(), "acme")
    provider.client.rest.pulls.async_request_reviewers = AsyncMock()
    await provider.assign_reviewers("service", ChangeRequestHandle(id=12, url="u"), [])
    provider.client.rest.pulls.async_request_reviewers.assert_not_awaited()


def test_create_requires_org_or_username() -> None:
    """Test that a provider entry with neither org nor username is rejected."""
    with pytest.raises(ValueError, match="requires an org or a username"):
        GitHubProvider.create(ProviderConfig(provider="github", token="tok", username=" "))


def test_create_with_username_only() -> None:
    """Test that the username becomes the owner when no org is configured."""
    provider = GitHubProvider.create(ProviderConfig(provider="github", token="tok", username="octocat"))
    assert provider.org == ""
    assert provider.owner == "octocat"
