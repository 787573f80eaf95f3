"""Type hints for the synchronize module."""

from typing import TYPE_CHECKING, Awaitable, Callable

from boneclone.schemas.config import ProviderConfig
from boneclone.synchronize.models import ChangeRequestBodyContext

if TYPE_CHECKING:
    from boneclone.providers.abc import RepositoryProviderBase

ProviderFactory = Callable[[ProviderConfig], Awaitable["RepositoryProviderBase"]]
"""Builds a discovery client for one provider entry."""

BodyBuilder = Callable[[ChangeRequestBodyContext], str]
"""Renders the description of a change request."""
