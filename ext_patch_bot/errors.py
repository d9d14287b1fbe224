from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .commands import CommandResult


class BotError(Exception):
    """Base class for failures that abort the pipeline of a single repo."""


class SourceListError(BotError):
    pass


class RepoNotFoundError(BotError):
    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"Failed to get repo info for {owner}/{name}")
        self.owner = owner
        self.name = name


class CommandError(BotError):
    def __init__(self, cmd: Sequence[str], result: CommandResult) -> None:
        stderr = result.stderr.strip()
        message = f"Command failed: {' '.join(cmd)}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)
        self.cmd = list(cmd)
        self.result = result


class PatchError(BotError):
    pass


class ManifestNotFoundError(BotError):
    pass
