"""Git operations backed by GitPython: clone, eligibility, and staging skeleton files."""

import shutil
import tempfile
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

import structlog
from git import Actor, GitCommandError, PushInfo, Repo
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from boneclone.repository.abc import GitOperationsBase
from boneclone.repository.exceptions import CloneError, EligibilityError, PushError
from boneclone.repository.files import get_all_filenames, is_excluded
from boneclone.repository.working_tree import WorkingTree
from boneclone.schemas.config import Config, ProviderConfig
from boneclone.schemas.descriptor import RemoteDescriptor
from boneclone.synchronize.models import EligibilityResult, LandingResult, RepositoryRef
from boneclone.utils.constants import (
    CLONE_DEPTH,
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_COMMITTER_EMAIL,
    DEFAULT_COMMITTER_NAME,
    REMOTE_NAME,
)
from boneclone.utils.helpers import redact_secret
from boneclone.utils.yaml import load_yaml_string

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_authenticated_url(url: str, username: str, token: str) -> str:
    """Embed basic-auth credentials into an http(s) clone URL.

    Other schemes (ssh, file) are returned unchanged. Any user info already
    present in the URL is replaced.
    """
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not token:
        return url
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    user = quote(username or "oauth2", safe="")
    netloc = f"{user}:{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def parse_remote_descriptor(content: bytes) -> RemoteDescriptor | None:
    """Parse a remote eligibility descriptor, returning None when it is malformed."""
    try:
        data = load_yaml_string(content.decode("utf-8"))
    except (UnicodeDecodeError, YAMLError) as exc:
        logger.debug("Eligibility descriptor is not valid YAML", error=str(exc))
        return None
    if not isinstance(data, dict):
        logger.debug("Eligibility descriptor is not a mapping", descriptor_type=type(data).__name__)
        return None
    try:
        return RemoteDescriptor.model_validate(data)
    except ValidationError as exc:
        logger.debug("Eligibility descriptor has an invalid structure", error=str(exc))
        return None


def committer_for_config(config: Config) -> Actor:
    """Return the commit identity from configuration, falling back to BoneClone's defaults."""
    return Actor(config.git.name or DEFAULT_COMMITTER_NAME, config.git.email or DEFAULT_COMMITTER_EMAIL)


class GitPythonOperations(GitOperationsBase):
    """Repository operations using GitPython and temporary directories.

    Skeleton files are read from ``source_root``, which defaults to the
    current working directory.
    """

    def __init__(self, source_root: Path | None = None) -> None:
        """Initialize the operations with the directory skeleton files are read from."""
        self.source_root = source_root if source_root is not None else Path.cwd()

    def clone(self, repo: RepositoryRef, provider_config: ProviderConfig) -> WorkingTree:
        """Shallow clone a repository into a fresh temporary directory."""
        path = Path(tempfile.mkdtemp(prefix="boneclone_"))
        clone_url = build_authenticated_url(repo.url, provider_config.username, provider_config.token)
        logger.debug("Cloning repository", repository=repo.name, url=repo.url, path=str(path))
        try:
            git_repo = Repo.clone_from(clone_url, path, depth=CLONE_DEPTH, no_single_branch=True)
        except GitCommandError as exc:
            shutil.rmtree(path, ignore_errors=True)
            # The original exception embeds the authenticated URL.
            reason = redact_secret(str(exc.stderr or exc), provider_config.token).strip()
            raise CloneError(f"failed to clone {repo.url}: {reason}") from None
        return WorkingTree(repo=git_repo, path=path)

    def check_eligibility(self, working_tree: WorkingTree, config: Config) -> EligibilityResult:
        """Read the eligibility descriptor from the HEAD commit and match the skeleton name.

        A missing or malformed descriptor makes the repository ineligible
        without raising.
        """
        filename = config.identifier.filename
        try:
            head_commit = working_tree.repo.head.commit
        except ValueError as exc:
            raise EligibilityError(f"unable to read HEAD commit: {exc}") from exc

        try:
            blob = head_commit.tree / filename
        except KeyError:
            logger.debug("Eligibility descriptor not found", filename=filename)
            return EligibilityResult(eligible=False)
        if blob.type != "blob":
            logger.debug("Eligibility descriptor path is not a file", filename=filename, object_type=blob.type)
            return EligibilityResult(eligible=False)

        descriptor = parse_remote_descriptor(blob.data_stream.read())
        if descriptor is None:
            return EligibilityResult(eligible=False)

        eligible = descriptor.accepts_skeleton(config.identifier.name)
        logger.debug("Checked eligibility descriptor", filename=filename, eligible=eligible, accepts=descriptor.accepts)
        return EligibilityResult(eligible=eligible, descriptor=descriptor)

    def stage_and_land(self, working_tree: WorkingTree, config: Config, provider_config: ProviderConfig, target_branch: str) -> LandingResult:
        """Copy each include group onto target_branch, committing and pushing after each group.

        A push that is already up to date ends the routine immediately, leaving
        any remaining include entries unprocessed. A branch missing from the
        remote is only pushed once it carries a new commit.
        """
        repo = working_tree.repo
        on_remote = self._ensure_on_target_branch(repo, target_branch)

        staged: list[str] = []
        changed = False
        for defined_file in config.files.include:
            for file in get_all_filenames(defined_file, self.source_root):
                if is_excluded(file, config.files.exclude):
                    logger.debug("Skipping excluded file", file=file)
                    continue
                self._write_and_stage_file(working_tree, file)
                staged.append(file)

            if self._commit_if_changed(repo, config):
                changed = True
            if not changed and not on_remote:
                logger.debug("Nothing committed on new branch, not pushing", branch=target_branch)
                continue
            if self._push(repo, provider_config, target_branch):
                logger.info("Branch already up to date", branch=target_branch)
                return LandingResult(files=staged, changed=changed)

        return LandingResult(files=staged, changed=changed)

    def _ensure_on_target_branch(self, repo: Repo, target_branch: str) -> bool:
        """Check out target_branch, creating it from origin/<branch> or HEAD when missing locally.

        Returns whether the branch already exists on origin. A blank branch
        name keeps the current HEAD, which is treated as present on origin.
        """
        branch = target_branch.strip()
        if not branch:
            return True
        remote_ref = next((ref for ref in repo.remote(REMOTE_NAME).refs if ref.remote_head == branch), None)
        if not repo.head.is_detached and repo.active_branch.name == branch:
            return remote_ref is not None

        local_head = next((head for head in repo.heads if head.name == branch), None)
        if local_head is not None:
            local_head.checkout()
            return remote_ref is not None

        base_commit = remote_ref.commit if remote_ref is not None else repo.head.commit
        logger.debug("Creating branch", branch=branch, base=base_commit.hexsha, from_remote=remote_ref is not None)
        repo.create_head(branch, base_commit).checkout()
        return remote_ref is not None

    def _write_and_stage_file(self, working_tree: WorkingTree, file: str) -> None:
        """Copy a skeleton file into the working tree at the same relative path and stage it."""
        destination = working_tree.path / file
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(self.source_root / file, destination)
        working_tree.repo.index.add([file])

    def _commit_if_changed(self, repo: Repo, config: Config) -> bool:
        """Commit the index when it differs from HEAD, returning whether a commit was made."""
        index = repo.index
        if not index.diff("HEAD"):
            return False
        actor = committer_for_config(config)
        commit = index.commit(DEFAULT_COMMIT_MESSAGE, author=actor, committer=actor)
        logger.debug("Created commit", sha=commit.hexsha, author=actor.name)
        return True

    def _push(self, repo: Repo, provider_config: ProviderConfig, target_branch: str) -> bool:
        """Push the branch to origin, returning True when the remote was already up to date."""
        branch = target_branch.strip()
        if not branch:
            if repo.head.is_detached:
                raise PushError("cannot push a detached HEAD without a target branch")
            branch = repo.active_branch.name
        refspec = f"refs/heads/{branch}:refs/heads/{branch}"

        try:
            push_infos = repo.remote(REMOTE_NAME).push(refspec)
            push_infos.raise_if_error()
        except GitCommandError as exc:
            reason = redact_secret(str(exc.stderr or exc), provider_config.token).strip()
            raise PushError(f"failed to push {branch}: {reason}") from None

        for push_info in push_infos:
            if push_info.flags & PushInfo.ERROR:
                raise PushError(f"push of {branch} rejected: {redact_secret(push_info.summary, provider_config.token).strip()}")
        return bool(push_infos) and all(push_info.flags & PushInfo.UP_TO_DATE for push_info in push_infos)
