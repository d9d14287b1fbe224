from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from ..commands import CommandResult, run_command
from ..errors import CommandError, RepoNotFoundError
from ..git_urls import strip_git_suffix
from ..state import RepoRef

logger = logging.getLogger(__name__)

Runner = Callable[..., CommandResult]


class GhCliPlatform:
    """Talks to GitHub through the `gh` command-line tool."""

    def __init__(self, *, runner: Runner = run_command, gh_bin: str = "gh") -> None:
        self._run = runner
        self._gh = gh_bin

    def _gh_cmd(self, *args: str) -> Sequence[str]:
        return [self._gh, *args]

    def current_user(self) -> str:
        cmd = self._gh_cmd("api", "user", "--jq", ".login")
        result = self._run(cmd)
        if not result.success:
            raise CommandError(cmd, result)
        return result.stdout.strip()

    def resolve_repo(self, owner: str, name: str) -> Tuple[str, str]:
        name = strip_git_suffix(name)
        result = self._run(
            self._gh_cmd("repo", "view", f"{owner}/{name}", "--json", "name,owner")
        )
        if not result.success:
            raise RepoNotFoundError(owner, name)
        data = json.loads(result.stdout)
        return data["owner"]["login"], data["name"]

    def existing_pr_branch(self, ref: RepoRef, author: str) -> Optional[str]:
        result = self._run(
            self._gh_cmd(
                "pr",
                "list",
                "--repo",
                ref.slug,
                "--author",
                author,
                "--json",
                "number,headRefName",
            )
        )
        if not result.success:
            logger.error("Failed to check for open PRs for %s", ref.slug)
            return None
        prs = json.loads(result.stdout or "[]")
        if not prs:
            return None
        return prs[0]["headRefName"]

    def clone(self, ref: RepoRef, target: Path) -> None:
        cmd = self._gh_cmd("repo", "clone", ref.slug, str(target))
        result = self._run(cmd)
        if not result.success:
            raise CommandError(cmd, result)

    def fork(self, ref: RepoRef) -> None:
        # --remote=false keeps gh from rewiring origin in the clone
        result = self._run(self._gh_cmd("repo", "fork", ref.slug, "--remote=false"))
        if not result.success:
            logger.warning("Fork of %s reported a failure; continuing", ref.slug)

    def create_pr(
        self, ref: RepoRef, *, head: str, title: str, body: str, cwd: Path
    ) -> Optional[str]:
        cmd = self._gh_cmd(
            "pr",
            "create",
            "--title",
            title,
            "--body",
            body,
            "--repo",
            ref.slug,
            "--head",
            head,
        )
        result = self._run(cmd, cwd=cwd)
        if result.success:
            return result.stdout.strip().split("\n")[0]
        if "already exists" in result.output:
            logger.info("A pull request for %s already exists on %s", head, ref.slug)
            return None
        raise CommandError(cmd, result)
