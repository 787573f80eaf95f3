"""Selects the provider implementation for a provider entry."""

import structlog

from boneclone.configuration.exceptions import UnknownProviderError
from boneclone.providers.abc import RepositoryProviderBase
from boneclone.providers.azure import AzureProvider
from boneclone.providers.github import GitHubProvider
from boneclone.providers.gitlab import GitLabProvider
from boneclone.schemas.config import ProviderConfig

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

PROVIDERS: dict[str, type[GitHubProvider] | type[GitLabProvider] | type[AzureProvider]] = {
    "github": GitHubProvider,
    "gitlab": GitLabProvider,
    "azure": AzureProvider,
}


async def new_provider(provider_config: ProviderConfig) -> RepositoryProviderBase:
    """Create the provider named by a provider entry, matching the name case-insensitively.

    Raises:
        UnknownProviderError: If the provider name is not supported.
    """
    kind = provider_config.provider.strip().lower()
    provider_class = PROVIDERS.get(kind)
    if provider_class is None:
        raise UnknownProviderError(provider_config.provider)
    logger.debug("Creating provider", provider=kind, org=provider_config.org)
    return provider_class.create(provider_config)
