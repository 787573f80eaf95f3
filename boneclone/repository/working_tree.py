"""Ephemeral working trees that clones are checked out into."""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from git import Repo


@dataclass
class WorkingTree:
    """A cloned repository living in a temporary directory.

    Use as a context manager, or call ``cleanup`` explicitly, so the clone is
    deleted once the repository has been processed.
    """

    repo: Repo
    path: Path

    def __enter__(self) -> "WorkingTree":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Close the repository and remove the temporary directory."""
        self.repo.close()
        if self.path.exists():
            shutil.rmtree(self.path, ignore_errors=True)
