"""Unit tests for the synchronization driver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from boneclone.configuration.exceptions import UnknownProviderError
from boneclone.providers.abc import RepositoryProviderBase
from boneclone.schemas.config import Config, ProviderConfig
from boneclone.synchronize.driver import process_repository, run_synchronization
from boneclone.synchronize.exceptions import RepositoryProcessingError
from boneclone.synchronize.models import RepositoryRef
from boneclone.synchronize.processor import RepositoryProcessorBase


def make_provider(repositories: list[RepositoryRef] | None = None, list_error: Exception | None = None) -> MagicMock:
    """Return a provider mock whose list_repositories returns repositories or raises list_error."""
    provider = MagicMock(spec=RepositoryProviderBase)
    provider.list_repositories = AsyncMock(return_value=repositories or [], side_effect=list_error)
    provider.aclose = AsyncMock()
    return provider


def make_processor(side_effect: object = None) -> MagicMock:
    """Return a processor mock."""
    processor = MagicMock(spec=RepositoryProcessorBase)
    processor.process = AsyncMock(side_effect=side_effect)
    return processor


@pytest.mark.asyncio
async def test_run_synchronization_skips_failing_provider() -> None:
    """Test that a provider failing discovery is skipped and the others are processed."""
    repositories = [
        RepositoryRef("one", "https://example.com/one.git"),
        RepositoryRef("two", "https://example.com/two.git"),
    ]
    providers = {
        "github": make_provider(repositories),
        "gitlab": make_provider(list_error=RuntimeError("unauthorized")),
    }

    async def factory(provider_config: ProviderConfig) -> RepositoryProviderBase:
        return providers[provider_config.provider]

    processor = make_processor()
    config = Config(providers=[ProviderConfig(provider="github"), ProviderConfig(provider="gitlab")])

    results = await run_synchronization(config, factory, processor)

    assert processor.process.await_count == 2
    processed = sorted(call.args[0].name for call in processor.process.await_args_list)
    assert processed == ["one", "two"]
    assert results.skipped_providers == ["gitlab"]
    assert results.failed == []
    providers["github"].aclose.assert_awaited_once()
    providers["gitlab"].aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_synchronization_skips_unknown_provider() -> None:
    """Test that a provider the factory cannot create is skipped."""
    github = make_provider([RepositoryRef("one", "https://example.com/one.git")])

    async def factory(provider_config: ProviderConfig) -> RepositoryProviderBase:
        if provider_config.provider == "bitbucket":
            raise UnknownProviderError(provider_config.provider)
        return github

    processor = make_processor()
    config = Config(providers=[ProviderConfig(provider="bitbucket"), ProviderConfig(provider="github")])

    results = await run_synchronization(config, factory, processor)

    assert results.skipped_providers == ["bitbucket"]
    assert processor.process.await_count == 1


@pytest.mark.asyncio
async def test_run_synchronization_isolates_repository_failures() -> None:
    """Test that one repository failing does not prevent the others from being processed."""
    repositories = [
        RepositoryRef("bad", "https://example.com/bad.git"),
        RepositoryRef("good", "https://example.com/good.git"),
    ]

    async def factory(provider_config: ProviderConfig) -> RepositoryProviderBase:
        return make_provider(repositories)

    async def process(repo: RepositoryRef, provider_config: ProviderConfig, config: Config) -> None:
        if repo.name == "bad":
            raise RepositoryProcessingError("clone", RuntimeError("boom"))

    processor = make_processor(side_effect=process)
    results = await run_synchronization(Config(providers=[ProviderConfig(provider="github")]), factory, processor)

    assert len(results.results) == 2
    assert [result.repo.name for result in results.failed] == ["bad"]
    assert str(results.failed[0].error) == "clone: boom"


@pytest.mark.asyncio
async def test_run_synchronization_without_providers() -> None:
    """Test that a run with no providers finishes with no results."""
    factory = AsyncMock()
    processor = make_processor()
    results = await run_synchronization(Config(), factory, processor)
    assert results.results == []
    assert results.skipped_providers == []
    factory.assert_not_awaited()


@pytest.mark.asyncio
async def test_process_repository_reports_success() -> None:
    """Test that a successful repository yields a succeeded result."""
    repo = RepositoryRef("one", "https://example.com/one.git")
    result = await process_repository(make_processor(), repo, ProviderConfig(provider="github"), Config())
    assert result.succeeded is True
    assert result.provider == "github"
