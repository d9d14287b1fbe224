from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Tuple

from dulwich import porcelain
from github import Auth, Github
from github.GithubException import GithubException, UnknownObjectException

from ..errors import RepoNotFoundError
from ..git_urls import github_https_url, strip_git_suffix, token_auth_github_url
from ..state import RepoRef

logger = logging.getLogger(__name__)


class GithubApiPlatform:
    """Talks to GitHub through the REST API (PyGithub); clones with dulwich."""

    def __init__(self, token: str, *, client: Github | None = None) -> None:
        if not token:
            raise ValueError("GITHUB_TOKEN is required for the api backend")
        self._token = token
        self._gh = client or Github(auth=Auth.Token(token))

    def current_user(self) -> str:
        return self._gh.get_user().login

    def resolve_repo(self, owner: str, name: str) -> Tuple[str, str]:
        name = strip_git_suffix(name)
        try:
            repo = self._gh.get_repo(f"{owner}/{name}")
        except UnknownObjectException as exc:
            raise RepoNotFoundError(owner, name) from exc
        return repo.owner.login, repo.name

    def existing_pr_branch(self, ref: RepoRef, author: str) -> Optional[str]:
        try:
            for pr in self._gh.get_repo(ref.slug).get_pulls(state="open"):
                if pr.user.login == author:
                    return pr.head.ref
        except GithubException as exc:
            logger.error("Failed to check for open PRs for %s: %s", ref.slug, exc)
        return None

    def clone(self, ref: RepoRef, target: Path) -> None:
        url = github_https_url(ref.owner, ref.name)
        clone_url = token_auth_github_url(url, self._token) or url
        logger.info("Cloning %s -> %s", url, target)
        porcelain.clone(clone_url, str(target), checkout=True, errstream=io.BytesIO())

    def fork(self, ref: RepoRef) -> None:
        try:
            self._gh.get_repo(ref.slug).create_fork()
        except GithubException as exc:
            logger.warning("Fork of %s reported a failure; continuing: %s", ref.slug, exc)

    def create_pr(
        self, ref: RepoRef, *, head: str, title: str, body: str, cwd: Path
    ) -> Optional[str]:
        repo = self._gh.get_repo(ref.slug)
        try:
            pr = repo.create_pull(
                title=title, body=body, head=head, base=repo.default_branch
            )
        except GithubException as exc:
            if exc.status == 422 and "already exists" in str(exc.data):
                logger.info("A pull request for %s already exists on %s", head, ref.slug)
                return None
            raise
        return pr.html_url
