from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from ..commands import CommandResult, run_command
from ..errors import CommandError

logger = logging.getLogger(__name__)

Runner = Callable[..., CommandResult]

_NOTHING_TO_COMMIT_MARKERS = ("nothing to commit", "no changes added to commit")


class GitCliClient:
    """Local git operations through the `git` binary."""

    def __init__(self, *, runner: Runner = run_command, git_bin: str = "git") -> None:
        self._run = runner
        self._git = git_bin

    def _checked(self, repo: Path, *args: str) -> CommandResult:
        cmd = [self._git, *args]
        result = self._run(cmd, cwd=repo)
        if not result.success:
            raise CommandError(cmd, result)
        return result

    def ensure_remote(self, repo: Path, name: str, url: str) -> None:
        result = self._run([self._git, "remote", "add", name, url], cwd=repo)
        if result.success:
            return
        if "already exists" not in result.output:
            raise CommandError([self._git, "remote", "add", name, url], result)
        self._checked(repo, "remote", "set-url", name, url)

    def create_branch(self, repo: Path, branch: str) -> None:
        self._checked(repo, "checkout", "-b", branch)

    def checkout_remote_branch(self, repo: Path, remote: str, branch: str) -> None:
        self._checked(repo, "fetch", remote)
        self._checked(repo, "checkout", "-B", branch, f"{remote}/{branch}")

    def diff(self, repo: Path) -> str:
        result = self._run([self._git, "diff"], cwd=repo)
        return result.stdout

    def stage_all(self, repo: Path) -> None:
        self._checked(repo, "add", ".")

    def commit(self, repo: Path, message: str) -> bool:
        cmd = [self._git, "commit", "-m", message]
        result = self._run(cmd, cwd=repo)
        if result.success:
            return True
        if any(marker in result.output for marker in _NOTHING_TO_COMMIT_MARKERS):
            return False
        raise CommandError(cmd, result)

    def push(self, repo: Path, remote: str, branch: str) -> None:
        self._checked(repo, "push", "-u", remote, branch)
