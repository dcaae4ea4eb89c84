"""Checkout request/outcome models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from git_worktree_keeper.models.branch import StartPoint


class CheckoutState(Enum):
    """States of the worktree creation state machine."""

    REQUESTED = "requested"
    NAVIGATE_EXISTING = "navigate-existing"
    CONFLICT_REJECTED = "conflict-rejected"
    LEFTOVER_REJECTED = "leftover-rejected"
    CREATED = "created"


class LeftoverPolicy(Enum):
    """What to do when the target path exists but is not a worktree."""

    REJECT = "reject"
    REMOVE_EMPTY = "remove-empty"  # remove an empty leftover directory, reject anything else


@dataclass
class CheckoutRequest:
    """A request to check out `name` into its own worktree."""

    name: str
    new_branch: Optional[str] = None  # explicit -b
    from_branch: Optional[str] = None  # explicit --from
    navigate: bool = True
    leftover_policy: LeftoverPolicy = LeftoverPolicy.REJECT
    files: List[str] = field(default_factory=list)

    @property
    def branch(self) -> str:
        return self.new_branch or self.name

    @property
    def explicit_create(self) -> bool:
        return self.new_branch is not None


@dataclass
class CheckoutResult:
    """Where the state machine ended up."""

    state: CheckoutState
    path: str
    branch: str
    start_point: Optional[StartPoint] = None
    created_branch: bool = False
    tracking_configured: bool = False
    copied_files: List[str] = field(default_factory=list)
