from __future__ import annotations

from typing import Optional, Tuple

from .base import FORK_REMOTE, GitClient, Platform
from .dulwich_git import DulwichGitClient
from .gh_cli import GhCliPlatform
from .git_cli import GitCliClient
from .github_api import GithubApiPlatform

BACKENDS = ("cli", "api")


def get_backend(
    kind: str = "cli", *, token: Optional[str] = None
) -> Tuple[Platform, GitClient]:
    selected = kind.lower().strip()
    if selected == "cli":
        return GhCliPlatform(), GitCliClient()
    if selected == "api":
        if not token:
            raise ValueError("GITHUB_TOKEN is required for the api backend")
        return GithubApiPlatform(token), DulwichGitClient(token)
    raise ValueError(f"Unknown backend: {kind}")


__all__ = [
    "BACKENDS",
    "FORK_REMOTE",
    "DulwichGitClient",
    "GhCliPlatform",
    "GitCliClient",
    "GitClient",
    "GithubApiPlatform",
    "Platform",
    "get_backend",
]
