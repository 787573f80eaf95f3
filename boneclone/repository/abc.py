"""Base ABC for repository operations."""

from abc import ABC, abstractmethod

from boneclone.repository.working_tree import WorkingTree
from boneclone.schemas.config import Config, ProviderConfig
from boneclone.synchronize.models import EligibilityResult, LandingResult, RepositoryRef


class GitOperationsBase(ABC):
    """Base ABC for the git operations a landing strategy chains together.

    Implementations are blocking; landing strategies run them in worker threads.
    """

    @abstractmethod
    def clone(self, repo: RepositoryRef, provider_config: ProviderConfig) -> WorkingTree:
        """Shallow clone a repository into an ephemeral working tree."""
        pass

    @abstractmethod
    def check_eligibility(self, working_tree: WorkingTree, config: Config) -> EligibilityResult:
        """Read the eligibility descriptor from HEAD and decide whether the repository opted in."""
        pass

    @abstractmethod
    def stage_and_land(self, working_tree: WorkingTree, config: Config, provider_config: ProviderConfig, target_branch: str) -> LandingResult:
        """Copy the skeleton files onto target_branch, commit, and push."""
        pass
