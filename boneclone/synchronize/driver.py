"""Orchestrates the synchronization of every repository across every provider."""

import asyncio
import time

import structlog
from structlog.contextvars import bound_contextvars

from boneclone.schemas.config import Config, ProviderConfig
from boneclone.synchronize.models import RepositoryRef
from boneclone.synchronize.processor import RepositoryProcessorBase
from boneclone.synchronize.results import RepositorySynchronizationResult, SynchronizationResults
from boneclone.synchronize.types import ProviderFactory

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def process_repository(
    processor: RepositoryProcessorBase,
    repo: RepositoryRef,
    provider_config: ProviderConfig,
    config: Config,
) -> RepositorySynchronizationResult:
    """Run the landing strategy for one repository, logging instead of raising on failure."""
    with bound_contextvars(repository=repo.name, provider=provider_config.provider):
        try:
            await processor.process(repo, provider_config, config)
        except Exception as exc:
            logger.error("Error processing repository", url=repo.url, error=str(exc))
            return RepositorySynchronizationResult(repo, provider_config.provider, error=exc)
    return RepositorySynchronizationResult(repo, provider_config.provider)


async def run_synchronization(
    config: Config,
    provider_factory: ProviderFactory,
    processor: RepositoryProcessorBase,
    cancel_event: asyncio.Event | None = None,
) -> SynchronizationResults:
    """Synchronize every repository of every configured provider.

    Providers are handled one after another. Every discovered repository is
    processed in its own task with no concurrency cap, and this coroutine
    returns once all of them have finished. Provider and repository failures
    are logged and never raised.

    cancel_event is accepted for future use and is currently not consulted:
    a run cannot be cancelled or timed out once started.
    """
    start_time = time.time()
    tasks: list[asyncio.Task[RepositorySynchronizationResult]] = []
    skipped_providers: list[str] = []

    for provider_config in config.providers:
        with bound_contextvars(provider=provider_config.provider, org=provider_config.org):
            try:
                provider = await provider_factory(provider_config)
            except Exception as exc:
                logger.error("Error creating provider", error=str(exc))
                skipped_providers.append(provider_config.provider)
                continue

            try:
                repositories = await provider.list_repositories()
            except Exception as exc:
                logger.error("Error listing repositories for provider", error=str(exc))
                skipped_providers.append(provider_config.provider)
                continue
            finally:
                await provider.aclose()

            logger.info("Discovered repositories", repository_count=len(repositories))
            for repo in repositories:
                tasks.append(asyncio.create_task(process_repository(processor, repo, provider_config, config)))

    results = list(await asyncio.gather(*tasks))
    summary = SynchronizationResults(results, skipped_providers)
    logger.info(
        "Synchronization finished",
        duration=round(time.time() - start_time, 2),
        repository_count=len(results),
        failed_count=len(summary.failed),
        skipped_provider_count=len(skipped_providers),
    )
    return summary
