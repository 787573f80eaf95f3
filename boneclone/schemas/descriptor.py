"""Pydantic schema for the eligibility descriptor stored inside target repositories."""

from pydantic import BaseModel, Field


class RemoteDescriptor(BaseModel):
    """Pydantic model for a repository's opt-in descriptor.

    A repository lists the skeletons it accepts updates from, and optionally
    who should review the pull requests BoneClone opens against it.
    """

    accepts: list[str] = Field(default_factory=list)
    reviewers: list[str] = Field(default_factory=list)

    def accepts_skeleton(self, skeleton_name: str) -> bool:
        """Return whether the descriptor opts into the named skeleton.

        Names are compared after trimming surrounding whitespace on both sides.
        An empty skeleton name is never accepted.
        """
        wanted = skeleton_name.strip()
        if not wanted:
            return False
        return any(accepted.strip() == wanted for accepted in self.accepts)
