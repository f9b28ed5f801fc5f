"""Run configuration for lopper."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunConfig:
    """Options for a single invocation, fixed once parsed."""

    dry_run: bool = False
    force: bool = False
    remote: str = "origin"
    protected: str = "main"
    path: Path = Path(".")

    def __post_init__(self) -> None:
        if not self.remote or not self.remote.strip():
            raise ValueError("remote cannot be empty")
        if not self.protected or not self.protected.strip():
            raise ValueError("protected branch cannot be empty")
        object.__setattr__(self, "remote", self.remote.strip())
        object.__setattr__(self, "protected", self.protected.strip())
