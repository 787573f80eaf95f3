"""Pydantic schema for the BoneClone configuration file."""

from pydantic import BaseModel, ConfigDict, Field

from boneclone.utils.constants import DEFAULT_IDENTIFIER_FILENAME


class ProviderConfig(BaseModel):
    """Pydantic model for a single source-control provider entry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str
    username: str = ""
    org: str = ""
    token: str = Field(default="", repr=False)
    # API base URL for GitLab, or the organization URL for Azure DevOps.
    url: str | None = None


class FileConfig(BaseModel):
    """Pydantic model for the set of skeleton files to propagate."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class IdentifierConfig(BaseModel):
    """Pydantic model for the eligibility marker read from target repositories."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    filename: str = DEFAULT_IDENTIFIER_FILENAME
    name: str = ""


class GitConfig(BaseModel):
    """Pydantic model for commit identity and landing behavior."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str = ""
    email: str = ""
    pull_request: bool = Field(default=False, alias="pullRequest")
    target_branch: str = Field(default="", alias="targetBranch")


class Config(BaseModel):
    """Pydantic model for a whole synchronization run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    providers: list[ProviderConfig] = Field(default_factory=list)
    files: FileConfig = Field(default_factory=FileConfig)
    identifier: IdentifierConfig = Field(default_factory=IdentifierConfig)
    git: GitConfig = Field(default_factory=GitConfig)
