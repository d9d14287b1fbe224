from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import pytest

from ext_patch_bot.errors import RepoNotFoundError
from ext_patch_bot.state import RepoRef


class FakePlatform:
    def __init__(
        self,
        *,
        user: str = "bot",
        renames: Optional[Dict[Tuple[str, str], Tuple[str, str]]] = None,
        missing: Iterable[Tuple[str, str]] = (),
        pr_branches: Optional[Dict[str, str]] = None,
        files: Optional[Dict[str, Dict[str, str]]] = None,
        pr_url: Optional[str] = "https://github.com/acme/ext/pull/7",
    ) -> None:
        self.user = user
        self.renames = renames or {}
        self.missing = set(missing)
        self.pr_branches = pr_branches or {}
        self.files = files or {}
        self.pr_url = pr_url
        self.calls: list[tuple] = []

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def current_user(self) -> str:
        return self.user

    def resolve_repo(self, owner: str, name: str) -> Tuple[str, str]:
        self.calls.append(("resolve", owner, name))
        if (owner, name) in self.missing:
            raise RepoNotFoundError(owner, name)
        return self.renames.get((owner, name), (owner, name))

    def existing_pr_branch(self, ref: RepoRef, author: str) -> Optional[str]:
        self.calls.append(("pr_list", ref.slug, author))
        return self.pr_branches.get(ref.slug)

    def clone(self, ref: RepoRef, target: Path) -> None:
        self.calls.append(("clone", ref.slug, target))
        target.mkdir(parents=True)
        for rel, content in self.files.get(ref.slug, {}).items():
            path = target / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

    def fork(self, ref: RepoRef) -> None:
        self.calls.append(("fork", ref.slug))

    def create_pr(
        self, ref: RepoRef, *, head: str, title: str, body: str, cwd: Path
    ) -> Optional[str]:
        self.calls.append(("create_pr", ref.slug, head, title, body))
        return self.pr_url


class FakeGit:
    def __init__(
        self,
        *,
        commit_result: bool = True,
        branch_files: Optional[Dict[str, str]] = None,
    ) -> None:
        self.commit_result = commit_result
        # Contents of the remote PR branch, written over the clone on checkout
        self.branch_files = branch_files or {}
        self.calls: list[tuple] = []

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def ensure_remote(self, repo: Path, name: str, url: str) -> None:
        self.calls.append(("ensure_remote", name, url))

    def create_branch(self, repo: Path, branch: str) -> None:
        self.calls.append(("create_branch", branch))

    def checkout_remote_branch(self, repo: Path, remote: str, branch: str) -> None:
        self.calls.append(("checkout_remote_branch", remote, branch))
        for rel, content in self.branch_files.items():
            path = repo / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

    def diff(self, repo: Path) -> str:
        self.calls.append(("diff",))
        return ""

    def stage_all(self, repo: Path) -> None:
        self.calls.append(("stage_all",))

    def commit(self, repo: Path, message: str) -> bool:
        self.calls.append(("commit", message))
        return self.commit_result

    def push(self, repo: Path, remote: str, branch: str) -> None:
        self.calls.append(("push", remote, branch))


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def git() -> FakeGit:
    return FakeGit()
