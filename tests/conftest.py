"""Test configuration and fixtures."""

import logging
from pathlib import Path
from typing import Callable, Generator

import pytest
from git import Actor, Repo
from typer.testing import CliRunner

from lopper.logging_config import HANDLER_NAME


def init_env(tmp_path: Path, branches: list[str]) -> tuple[Path, Path]:
    """Create a local repository whose origin is a bare repository holding main and `branches`."""
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Ensure we're on main branch
    if "main" not in local_repo.heads:
        local_repo.create_head("main")
    main_branch = local_repo.heads.main
    main_branch.checkout()

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")

    for name in branches:
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()
        test_file = local_path / f"{name.replace('/', '_')}.txt"
        test_file.write_text(f"{name} content")
        local_repo.index.add([test_file.name])
        local_repo.index.commit(f"Add {name}", author=author)
        origin.push(name)

    main_branch.checkout()
    return local_path, remote_path


@pytest.fixture
def remote_heads() -> Callable[[Path], list[str]]:
    """Return a helper listing the branch names present in a bare remote."""

    def _heads(remote_path: Path) -> list[str]:
        return sorted(head.name for head in Repo(remote_path).heads)

    return _heads


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment whose remote has main, feature/a and feature/b.

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    yield init_env(tmp_path, ["feature/a", "feature/b"])


@pytest.fixture
def main_only_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment whose remote only has main."""
    yield init_env(tmp_path, [])


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop the console handler installed by the CLI so it never outlives a test."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)


@pytest.fixture
def reject_branch() -> Callable[[Path, str], None]:
    """Return a helper installing a pre-receive hook that rejects pushes to one branch."""

    def _install(remote_path: Path, branch_name: str) -> None:
        hook = remote_path / "hooks" / "pre-receive"
        hook.parent.mkdir(exist_ok=True)
        hook.write_text(
            "#!/bin/sh\n"
            "while read old new ref; do\n"
            f'  if [ "$ref" = "refs/heads/{branch_name}" ]; then\n'
            '    echo "rejected $ref" >&2\n'
            "    exit 1\n"
            "  fi\n"
            "done\n"
            "exit 0\n"
        )
        hook.chmod(0o755)

    return _install
