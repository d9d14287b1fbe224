from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..errors import PatchError
from .base import PatchApplier

logger = logging.getLogger(__name__)


class AttributeRename(PatchApplier):
    """
    Rename a theme attribute by plain substring replacement.

    Every ``<subdir>/*<suffix>`` file is visited; only files that contain the
    old key are rewritten. No structural parsing is done, so the old key must
    not occur inside unrelated keys or values.
    """

    bumps_version = True

    def __init__(
        self, old: str, new: str, *, subdir: str = "themes", suffix: str = ".json"
    ) -> None:
        if old in new:
            raise ValueError("New key must not contain the old key")
        self.old = old
        self.new = new
        self.subdir = subdir
        self.suffix = suffix

    def theme_files(self, repo_dir: Path) -> List[Path]:
        directory = repo_dir / self.subdir
        if not directory.is_dir():
            return []
        return sorted(
            p for p in directory.iterdir() if p.is_file() and p.name.endswith(self.suffix)
        )

    def apply(self, repo_dir: Path) -> bool:
        themes = self.theme_files(repo_dir)
        if not themes:
            raise PatchError(f"Theme not found under {repo_dir / self.subdir}")

        changed = False
        for path in themes:
            text = path.read_text(encoding="utf-8")
            if self.old not in text:
                continue
            path.write_text(text.replace(self.old, self.new), encoding="utf-8")
            logger.info("Renamed %s -> %s in %s", self.old, self.new, path.name)
            changed = True
        return changed
