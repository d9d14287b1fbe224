from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Optional

from dulwich import porcelain
from dulwich.repo import Repo

from ..git_urls import token_auth_github_url

logger = logging.getLogger(__name__)


def _load_repo(repo_path: Path) -> Repo:
    return Repo.discover(str(repo_path))


def _remote_url(repo: Repo, remote: str) -> str:
    return repo.get_config().get((b"remote", remote.encode()), b"url").decode()


def _identity() -> str:
    name = os.environ.get("GIT_AUTHOR_NAME") or "ext-patch-bot"
    email = os.environ.get("GIT_AUTHOR_EMAIL") or "ext-patch-bot@users.noreply.github.com"
    return f"{name} <{email}>"


def _index_has_changes_vs_head(repo: Repo) -> bool:
    """Return True if the index differs from HEAD (i.e., there is something to commit)."""
    head_tree = repo[repo.head()].tree
    index = repo.open_index()
    return any(index.changes_from_tree(repo.object_store, head_tree))


def _stage_deletions(repo: Repo) -> None:
    index = repo.open_index()
    removed = [
        path
        for path in index
        if not os.path.lexists(os.path.join(repo.path, os.fsdecode(path)))
    ]
    for path in removed:
        del index[path]
    if removed:
        index.write()


class DulwichGitClient:
    """Local git operations in pure Python; pushes with a token-auth URL."""

    def __init__(self, token: Optional[str]) -> None:
        self._token = token

    def _transport_url(self, repo: Repo, remote: str) -> str:
        url = _remote_url(repo, remote)
        if self._token:
            return token_auth_github_url(url, self._token) or url
        return url

    def ensure_remote(self, repo: Path, name: str, url: str) -> None:
        r = _load_repo(repo)
        config = r.get_config()
        section = (b"remote", name.encode())
        config.set(section, b"url", url.encode())
        config.set(section, b"fetch", f"+refs/heads/*:refs/remotes/{name}/*".encode())
        config.write_to_path()

    def create_branch(self, repo: Path, branch: str) -> None:
        r = _load_repo(repo)
        branch_ref = f"refs/heads/{branch}".encode()
        porcelain.branch_create(r.path, branch.encode(), r.head())
        # Moving HEAD alone keeps the patched working tree intact
        r.refs.set_symbolic_ref(b"HEAD", branch_ref)
        logger.info("Created branch %s", branch)

    def checkout_remote_branch(self, repo: Path, remote: str, branch: str) -> None:
        r = _load_repo(repo)
        result = porcelain.fetch(
            r.path, self._transport_url(r, remote), errstream=io.BytesIO()
        )
        for ref_name, sha in result.refs.items():
            if ref_name.startswith(b"refs/heads/"):
                tracking = f"refs/remotes/{remote}/".encode() + ref_name[len(b"refs/heads/") :]
                r.refs[tracking] = sha

        remote_ref = f"refs/remotes/{remote}/{branch}".encode()
        if remote_ref not in r.refs:
            raise RuntimeError(f"Branch {branch} not found on remote {remote}")
        branch_ref = f"refs/heads/{branch}".encode()
        r.refs[branch_ref] = r.refs[remote_ref]
        r.refs.set_symbolic_ref(b"HEAD", branch_ref)
        porcelain.reset(r.path, "hard", r.refs[branch_ref])
        logger.info("Checked out %s from %s", branch, remote)

    def diff(self, repo: Path) -> str:
        status = porcelain.status(_load_repo(repo))
        lines = []
        for kind, paths in status.staged.items():
            lines.extend(f"{kind}: {os.fsdecode(p)}" for p in paths)
        lines.extend(f"modified: {os.fsdecode(p)}" for p in status.unstaged)
        lines.extend(f"untracked: {os.fsdecode(p)}" for p in status.untracked)
        return "\n".join(lines)

    def stage_all(self, repo: Path) -> None:
        r = _load_repo(repo)
        status = porcelain.status(r)
        pending = [os.fsdecode(p) for p in [*status.unstaged, *status.untracked]]
        present = [
            os.path.join(r.path, p)
            for p in pending
            if os.path.lexists(os.path.join(r.path, p))
        ]
        if present:
            porcelain.add(r.path, paths=present)
        _stage_deletions(r)

    def commit(self, repo: Path, message: str) -> bool:
        r = _load_repo(repo)
        if not _index_has_changes_vs_head(r):
            return False
        identity = _identity().encode()
        porcelain.commit(
            r.path,
            message=message.encode(),
            author=identity,
            committer=identity,
        )
        return True

    def push(self, repo: Path, remote: str, branch: str) -> None:
        r = _load_repo(repo)
        refspec = f"refs/heads/{branch}:refs/heads/{branch}"
        # The transport URL carries the token; only the remote name is logged.
        logger.info("Pushing %s to %s", refspec, remote)
        null_stream = io.BytesIO()
        porcelain.push(
            r.path,
            self._transport_url(r, remote),
            refspecs=[refspec],
            errstream=null_stream,
            outstream=null_stream,
        )
