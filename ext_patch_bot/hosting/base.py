from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Tuple

from ..state import RepoRef

FORK_REMOTE = "fork"


class Platform(Protocol):
    """
    Operations against the code-hosting platform.

    - `resolve_repo` raises `RepoNotFoundError` when the repo is gone.
    - `existing_pr_branch` returns the head branch of the first open PR
      authored by `author`, or None (a failed lookup also yields None).
    - `create_pr` returns the PR URL, or None when a PR for the head branch
      already exists.
    """

    def current_user(self) -> str: ...

    def resolve_repo(self, owner: str, name: str) -> Tuple[str, str]: ...

    def existing_pr_branch(self, ref: RepoRef, author: str) -> Optional[str]: ...

    def clone(self, ref: RepoRef, target: Path) -> None: ...

    def fork(self, ref: RepoRef) -> None: ...

    def create_pr(
        self, ref: RepoRef, *, head: str, title: str, body: str, cwd: Path
    ) -> Optional[str]: ...


class GitClient(Protocol):
    """
    Local git operations on a clone.

    `commit` returns False when there was nothing to commit; other failures
    raise `CommandError` (or the backend's own error).
    """

    def ensure_remote(self, repo: Path, name: str, url: str) -> None: ...

    def create_branch(self, repo: Path, branch: str) -> None: ...

    def checkout_remote_branch(self, repo: Path, remote: str, branch: str) -> None: ...

    def diff(self, repo: Path) -> str: ...

    def stage_all(self, repo: Path) -> None: ...

    def commit(self, repo: Path, message: str) -> bool: ...

    def push(self, repo: Path, remote: str, branch: str) -> None: ...
