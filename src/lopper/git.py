"""Git remote operations."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from lopper.logging_config import get_logger

logger = get_logger(__name__)

HEADS_PREFIX = "refs/heads/"


class GitError(Exception):
    """Git operation error."""


@dataclass
class DeletionTally:
    """Outcome of a deletion run."""

    succeeded: int = 0
    failed: int = 0
    deleted: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    def record(self, branch_name: str, ok: bool) -> None:
        if ok:
            self.succeeded += 1
            self.deleted.append(branch_name)
        else:
            self.failed += 1
            self.failures.append(branch_name)


def filter_branches(branch_names: Iterable[str], protected: str = "main") -> list[str]:
    """Drop the protected branch and the HEAD pointer, keeping remote order.

    Matching is exact, so every listed copy of the protected name is removed
    while case variants such as ``Main`` are kept.
    """
    return [name for name in branch_names if name and name != protected and name != "HEAD"]


class RemoteRepo:
    """Branch operations against a single remote of a local repository."""

    def __init__(self, path: Path, remote: str = "origin", protected: str = "main") -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err
        self.remote = remote
        self.protected = protected

    def list_remote_branches(self) -> list[str]:
        """List branch names on the remote in the order git reports them.

        Raises:
            GitError: If the remote cannot be listed
        """
        logger.debug("Running git ls-remote --heads %s", self.remote)
        try:
            output = self.repo.git.ls_remote("--heads", self.remote)
        except GitCommandError as err:
            raise GitError(f"Failed to list branches on '{self.remote}': {err}") from err

        branches = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            ref = parts[1]
            if ref.startswith(HEADS_PREFIX):
                ref = ref[len(HEADS_PREFIX) :]
            branches.append(ref)
        logger.info("Remote '%s' has %d branch(es)", self.remote, len(branches))
        return branches

    def get_branches_to_delete(self) -> list[str]:
        """Get the remote branches that are candidates for deletion."""
        return filter_branches(self.list_remote_branches(), self.protected)

    def delete_remote_branch(self, branch_name: str) -> bool:
        """Delete a single remote branch. Returns True if successful."""
        # Never delete the protected branch
        if branch_name == self.protected:
            logger.info("Refusing to delete protected branch '%s'", branch_name)
            return False

        logger.debug("Running git push %s --delete %s", self.remote, branch_name)
        try:
            self.repo.git.push(self.remote, "--delete", branch_name)
        except GitCommandError as err:
            logger.info("Failed to delete '%s' on '%s': %s", branch_name, self.remote, (err.stderr or "").strip())
            return False
        logger.info("Deleted '%s' on '%s'", branch_name, self.remote)
        return True

    def delete_branches(
        self,
        branch_names: Iterable[str],
        on_start: Optional[Callable[[str], None]] = None,
        on_result: Optional[Callable[[str, bool], None]] = None,
    ) -> DeletionTally:
        """Delete each branch in turn; a failure is counted and the loop continues."""
        tally = DeletionTally()
        for branch_name in branch_names:
            if not branch_name:
                continue
            if on_start:
                on_start(branch_name)
            ok = self.delete_remote_branch(branch_name)
            tally.record(branch_name, ok)
            if on_result:
                on_result(branch_name, ok)
        return tally
