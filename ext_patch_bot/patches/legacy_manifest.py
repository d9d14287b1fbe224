from __future__ import annotations

import logging
from pathlib import Path

from ..versioning import JSON_MANIFEST, TOML_MANIFEST
from .base import PatchApplier

logger = logging.getLogger(__name__)


class LegacyManifestRemoval(PatchApplier):
    """Delete extension.json once extension.toml has replaced it."""

    bumps_version = False

    def apply(self, repo_dir: Path) -> bool:
        legacy = repo_dir / JSON_MANIFEST
        if not legacy.exists():
            logger.info("%s already removed", JSON_MANIFEST)
            return False
        if not (repo_dir / TOML_MANIFEST).exists():
            logger.info("No %s yet; keeping %s", TOML_MANIFEST, JSON_MANIFEST)
            return False
        legacy.unlink()
        logger.info("Removed %s from %s", JSON_MANIFEST, repo_dir.name)
        return True
