"""Data types passed between discovery, landing strategies, and the orchestrator."""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from boneclone.schemas.descriptor import RemoteDescriptor


@dataclass(frozen=True)
class RepositoryRef:
    """A repository discovered on a provider.

    Azure DevOps names repositories as '<project>/<repository>'; every other
    provider uses the bare repository name.
    """

    name: str
    url: str


@dataclass(frozen=True)
class ChangeRequestHandle:
    """A pull request or merge request created on a provider."""

    id: int
    url: str


@dataclass(frozen=True)
class EligibilityResult:
    """Outcome of reading a repository's eligibility descriptor."""

    eligible: bool
    descriptor: RemoteDescriptor = field(default_factory=RemoteDescriptor)


@dataclass(frozen=True)
class LandingResult:
    """Outcome of staging skeleton files onto a branch and pushing them."""

    files: list[str] = field(default_factory=list)
    changed: bool = False


class ChangeRequestBodyContext(BaseModel):
    """Values available when rendering a change request body."""

    skeleton_name: str = ""
    repository: str
    base_branch: str
    head_branch: str
    files_changed: list[str] = Field(default_factory=list)
    original_author: str | None = None
