"""Branch model and related enums"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional

class BranchLocation(Enum):
    """Where a branch name currently exists."""
    NOWHERE = "nowhere"
    LOCAL_ONLY = "local-only"
    REMOTE_ONLY = "remote-only"
    BOTH = "both"

    @classmethod
    def from_probes(cls, local: bool, remote: bool) -> "BranchLocation":
        if local and remote:
            return cls.BOTH
        if local:
            return cls.LOCAL_ONLY
        if remote:
            return cls.REMOTE_ONLY
        return cls.NOWHERE

    @property
    def exists(self) -> bool:
        return self is not BranchLocation.NOWHERE

    @property
    def is_local(self) -> bool:
        return self in (BranchLocation.LOCAL_ONLY, BranchLocation.BOTH)

@dataclass(frozen=True)
class RefConflict:
    """A requested branch name that collides with an existing branch path."""
    requested: str
    conflicting_branch: str

@dataclass(frozen=True)
class StartPoint:
    """Commit reference to start a new branch from.

    succeeded is False when the remote could not be used (no remote, or
    fetch failed and a local branch was used instead); note explains why.
    """
    start_point: str
    succeeded: bool
    note: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return not self.succeeded
