"""Contains results of a synchronization run."""

from boneclone.synchronize.models import RepositoryRef


class RepositorySynchronizationResult:
    """Contains the outcome of processing one repository."""

    def __init__(self, repo: RepositoryRef, provider: str, error: Exception | None = None) -> None:
        """Initialize the result with the repository, its provider, and any error raised."""
        self.repo = repo
        self.provider = provider
        self.error = error

    @property
    def succeeded(self) -> bool:
        """Whether the repository was processed without error."""
        return self.error is None


class SynchronizationResults:
    """Contains results of the synchronization workflow for every provider and repository."""

    def __init__(self, results: list[RepositorySynchronizationResult], skipped_providers: list[str]) -> None:
        """Initialize the results with per-repository outcomes and the providers that were skipped."""
        self.results = results
        self.skipped_providers = skipped_providers

    @property
    def failed(self) -> list[RepositorySynchronizationResult]:
        """Results for repositories that failed."""
        return [result for result in self.results if not result.succeeded]
