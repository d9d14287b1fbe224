from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str
    source_url: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def with_identity(self, owner: str, name: str) -> RepoRef:
        return replace(self, owner=owner, name=name)


@dataclass(frozen=True)
class RepoHandle:
    """A cloned repository; operations take this instead of relying on the cwd."""

    ref: RepoRef
    root: Path


@dataclass(frozen=True)
class PullRequestState:
    exists: bool
    branch_name: Optional[str] = None

    @classmethod
    def none(cls) -> PullRequestState:
        return cls(exists=False)


class RepoOutcome(str, Enum):
    OPENED = "opened"
    UPDATED = "updated"
    ALREADY_OPEN = "already_open"
    NO_OPEN_PR = "no_open_pr"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    UNCHANGED = "unchanged"
    ABANDONED = "abandoned"


@dataclass
class RepoRunState:
    """
    State for one attempt of the per-repo pipeline.

    A fresh instance is built for every retry so an attempt never sees the
    leftovers of a failed one.
    """

    ref: RepoRef
    pr_state: PullRequestState = field(default_factory=PullRequestState.none)
    handle: Optional[RepoHandle] = None


@dataclass
class RunSummary:
    outcomes: Dict[str, RepoOutcome] = field(default_factory=dict)

    def record(self, ref: RepoRef, outcome: RepoOutcome) -> None:
        self.outcomes[ref.slug] = outcome

    def count(self, outcome: RepoOutcome) -> int:
        return sum(1 for o in self.outcomes.values() if o is outcome)
