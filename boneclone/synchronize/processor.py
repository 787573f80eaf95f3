"""Landing strategies that apply the skeleton to a single repository."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

import structlog

from boneclone.providers.abc import ChangeRequestProviderBase, supports_change_requests
from boneclone.repository.abc import GitOperationsBase
from boneclone.repository.working_tree import WorkingTree
from boneclone.schemas.config import Config, ProviderConfig
from boneclone.synchronize.exceptions import ProcessorConfigurationError, ProviderCapabilityError, RepositoryProcessingError
from boneclone.synchronize.models import ChangeRequestBodyContext, ChangeRequestHandle, EligibilityResult, LandingResult, RepositoryRef
from boneclone.synchronize.types import BodyBuilder, ProviderFactory
from boneclone.utils.constants import CHANGE_REQUEST_BODY_TEMPLATE, DEFAULT_PULL_REQUEST_TITLE
from boneclone.utils.helpers import generate_branch_name, resolve_target_branch
from boneclone.utils.templates import construct_packaged_template, render_template_with_model

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

T = TypeVar("T")

STAGE_CLONE = "clone"
STAGE_VALIDATE = "validate"
STAGE_COPY = "copy"
STAGE_CREATE_PULL_REQUEST = "create pull request"


def build_change_request_body(context: ChangeRequestBodyContext) -> str:
    """Render the default change request description."""
    template = construct_packaged_template(CHANGE_REQUEST_BODY_TEMPLATE)
    return render_template_with_model(model=context, template=template)


def resolve_pull_request_title(skeleton_name: str) -> str:
    """Return '<skeleton> update', or the default title when no skeleton name is configured."""
    skeleton_name = skeleton_name.strip()
    if skeleton_name:
        return f"{skeleton_name} update"
    return DEFAULT_PULL_REQUEST_TITLE


async def run_stage(stage: str, func: Callable[..., T], *args: Any) -> T:
    """Run a blocking git operation in a worker thread, labelling any failure with its stage."""
    try:
        return await asyncio.to_thread(func, *args)
    except Exception as exc:
        raise RepositoryProcessingError(stage, exc) from exc


class RepositoryProcessorBase(ABC):
    """Base ABC for landing strategies."""

    def __init__(self, git_operations: GitOperationsBase | None) -> None:
        """Initialize the processor with the git operations it chains together."""
        if git_operations is None:
            raise ProcessorConfigurationError("git ops not configured")
        self.git_operations = git_operations

    @abstractmethod
    async def process(self, repo: RepositoryRef, provider_config: ProviderConfig, config: Config) -> None:
        """Apply the skeleton to one repository.

        Raises:
            RepositoryProcessingError: If any stage fails; the stage label prefixes the message.
        """
        pass

    async def _clone_and_check(self, repo: RepositoryRef, provider_config: ProviderConfig, config: Config) -> tuple[WorkingTree, EligibilityResult]:
        """Clone the repository and read its eligibility, cleaning up if the check fails."""
        working_tree = await run_stage(STAGE_CLONE, self.git_operations.clone, repo, provider_config)
        try:
            eligibility = await run_stage(STAGE_VALIDATE, self.git_operations.check_eligibility, working_tree, config)
        except RepositoryProcessingError:
            await asyncio.to_thread(working_tree.cleanup)
            raise
        return working_tree, eligibility


class DirectProcessor(RepositoryProcessorBase):
    """Pushes the skeleton straight onto the configured target branch."""

    async def process(self, repo: RepositoryRef, provider_config: ProviderConfig, config: Config) -> None:
        """Clone, check eligibility, then copy, commit, and push to the target branch."""
        logger.info("Processing repository", url=repo.url)
        working_tree, eligibility = await self._clone_and_check(repo, provider_config, config)
        try:
            if not eligibility.eligible:
                logger.info("Repository has not opted in, skipping")
                return
            target_branch = resolve_target_branch(config.git.target_branch)
            result = await run_stage(STAGE_COPY, self.git_operations.stage_and_land, working_tree, config, provider_config, target_branch)
            logger.info("Landed skeleton files", branch=target_branch, files=result.files, changed=result.changed)
        finally:
            await asyncio.to_thread(working_tree.cleanup)


class PullRequestProcessor(RepositoryProcessorBase):
    """Pushes the skeleton onto a fresh branch and opens a change request for it."""

    def __init__(
        self,
        git_operations: GitOperationsBase | None,
        provider_factory: ProviderFactory | None,
        body_builder: BodyBuilder = build_change_request_body,
    ) -> None:
        """Initialize the processor with git operations, a provider factory, and a body builder."""
        super().__init__(git_operations)
        if provider_factory is None:
            raise ProcessorConfigurationError("provider factory not configured")
        self.provider_factory = provider_factory
        self.body_builder = body_builder

    async def process(self, repo: RepositoryRef, provider_config: ProviderConfig, config: Config) -> None:
        """Clone, check eligibility, land the files on a new branch, then open a change request."""
        logger.info("Processing repository", url=repo.url)
        working_tree, eligibility = await self._clone_and_check(repo, provider_config, config)
        try:
            if not eligibility.eligible:
                logger.info("Repository has not opted in, skipping")
                return
            head_branch = generate_branch_name()
            result = await run_stage(STAGE_COPY, self.git_operations.stage_and_land, working_tree, config, provider_config, head_branch)
        finally:
            await asyncio.to_thread(working_tree.cleanup)

        if not result.changed:
            logger.info("Repository already matches the skeleton, not opening a pull request", branch=head_branch)
            return

        base_branch = resolve_target_branch(config.git.target_branch)
        try:
            await self._open_change_request(repo, provider_config, config, eligibility, result, base_branch, head_branch)
        except Exception as exc:
            raise RepositoryProcessingError(STAGE_CREATE_PULL_REQUEST, exc) from exc

    async def _open_change_request(
        self,
        repo: RepositoryRef,
        provider_config: ProviderConfig,
        config: Config,
        eligibility: EligibilityResult,
        result: LandingResult,
        base_branch: str,
        head_branch: str,
    ) -> None:
        """Open the change request and request reviews from the descriptor's reviewers."""
        provider = await self.provider_factory(provider_config)
        try:
            if not supports_change_requests(provider):
                raise ProviderCapabilityError(f"provider does not support pull requests: {provider_config.provider}")
            skeleton_name = config.identifier.name.strip()
            handle = await provider.open_change_request(
                repo.name,
                base_branch,
                head_branch,
                resolve_pull_request_title(skeleton_name),
                body_builder=self.body_builder,
                files_changed=result.files,
                original_author=None,
                skeleton_name=skeleton_name,
            )
            logger.info("Opened pull request", id=handle.id, url=handle.url, base=base_branch, head=head_branch)
            for reviewer in eligibility.descriptor.reviewers:
                await self._assign_reviewer(provider, repo, handle, reviewer)
        finally:
            await provider.aclose()

    async def _assign_reviewer(self, provider: ChangeRequestProviderBase, repo: RepositoryRef, handle: ChangeRequestHandle, reviewer: str) -> None:
        """Request a review from one user; failures are logged and ignored."""
        try:
            await provider.assign_reviewers(repo.name, handle, [reviewer])
        except Exception as exc:
            logger.warning("Failed to assign reviewer", reviewer=reviewer, id=handle.id, error=str(exc))


def new_processor_for_config(
    config: Config,
    git_operations: GitOperationsBase | None,
    provider_factory: ProviderFactory | None,
) -> RepositoryProcessorBase:
    """Return the pull request strategy when git.pullRequest is set, otherwise the direct strategy."""
    if config.git.pull_request:
        return PullRequestProcessor(git_operations, provider_factory)
    return DirectProcessor(git_operations)
