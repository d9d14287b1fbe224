from __future__ import annotations

import contextlib
import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from .state import RepoHandle, RepoRef

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_WORKING_DIR = Path("work")


@contextlib.contextmanager
def switch_dir(path: Path) -> Iterator[Path]:
    """Make ``path`` the working directory until the block exits, however it exits."""
    original = Path.cwd()
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(original)


class WorkspaceManager:
    def __init__(self, root: Path = DEFAULT_WORKING_DIR) -> None:
        self.root = Path(root).resolve()

    def create(self) -> Path:
        if self.root.exists():
            logger.info("Clearing previous workspace %s", self.root)
        shutil.rmtree(self.root, ignore_errors=True)
        self.root.mkdir(parents=True)
        return self.root

    def repo_path(self, ref: RepoRef) -> Path:
        # Same-named repos of different owners get separate clones
        return self.root / f"{ref.owner}__{ref.name}"

    def clone_target(self, ref: RepoRef) -> Path:
        """Path to clone ``ref`` into, emptied of any earlier attempt."""
        target = self.repo_path(ref)
        if target.exists():
            logger.info("Removing leftover clone at %s", target)
            shutil.rmtree(target)
        return target

    def handle_for(self, ref: RepoRef) -> RepoHandle:
        return RepoHandle(ref=ref, root=self.repo_path(ref))

    def with_repo_dir(self, handle: RepoHandle, fn: Callable[[RepoHandle], T]) -> T:
        with switch_dir(handle.root):
            return fn(handle)
