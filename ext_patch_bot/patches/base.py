from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class PatchApplier(ABC):
    # Whether the manifest version must be bumped after a change.
    bumps_version: bool = True

    @abstractmethod
    def apply(self, repo_dir: Path) -> bool:
        """Rewrite files under ``repo_dir``; return True when anything changed."""
        raise NotImplementedError
