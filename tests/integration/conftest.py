"""Fixtures for integration tests against local bare git repositories."""

from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog
from git import Actor, Repo

SEED_ACTOR = Actor("Seeder", "seeder@example.com")

SeedRemote = Callable[..., Path]


@pytest.fixture(autouse=True)
def configure_structlog() -> Generator[None, None, None]:
    """Route structlog through the standard library logger while tests run."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


def commit_files(repo: Repo, root: Path, files: dict[str, str], message: str) -> None:
    """Write files into a working tree and commit them."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    repo.index.add(list(files))
    repo.index.commit(message, author=SEED_ACTOR, committer=SEED_ACTOR)


@pytest.fixture
def seed_remote(tmp_path: Path) -> SeedRemote:
    """Return a function creating a bare remote whose main branch holds the given files.

    Extra branches can be created with ``branches={"develop": {...}}``; each
    one starts from main and adds its own files.
    """

    def seed(name: str = "remote", files: dict[str, str] | None = None, branches: dict[str, dict[str, str]] | None = None) -> Path:
        remote_path = tmp_path / f"{name}.git"
        Repo.init(remote_path, bare=True, initial_branch="main")

        seed_path = tmp_path / f"{name}-seed"
        seed_repo = Repo.init(seed_path, initial_branch="main")
        commit_files(seed_repo, seed_path, files or {"README.md": "# seeded\n"}, "Initial commit")
        origin = seed_repo.create_remote("origin", remote_path.as_uri())
        origin.push("refs/heads/main:refs/heads/main")

        for branch, branch_files in (branches or {}).items():
            seed_repo.create_head(branch, "main").checkout()
            commit_files(seed_repo, seed_path, branch_files, f"Start {branch}")
            origin.push(f"refs/heads/{branch}:refs/heads/{branch}")
            seed_repo.heads.main.checkout()

        seed_repo.close()
        return remote_path

    return seed


@pytest.fixture
def skeleton(tmp_path: Path) -> Path:
    """Create the skeleton directory files are propagated from."""
    root = tmp_path / "skeleton"
    (root / "ci").mkdir(parents=True)
    (root / "ci" / "build.sh").write_text("#!/bin/sh\necho build\n", encoding="utf-8")
    (root / "ci" / "mocks.sh").write_text("#!/bin/sh\necho mocks\n", encoding="utf-8")
    (root / "Makefile").write_text("all:\n\t./ci/build.sh\n", encoding="utf-8")
    return root
