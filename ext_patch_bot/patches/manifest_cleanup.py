from __future__ import annotations

import logging
import re
import shutil
import tomllib
from pathlib import Path

import tomli_w

from ..errors import PatchError
from ..versioning import TOML_MANIFEST
from .base import PatchApplier
from .manifest_port import GRAMMAR_CONFIG_DIR

logger = logging.getLogger(__name__)

# A bare [grammars] header next to [grammars.<id>] tables may redeclare them,
# so it is parsed under its own name and dropped.
_BARE_GRAMMARS_RE = re.compile(r"^\[grammars\][ \t]*$", re.MULTILINE)
_STRAY_TABLE = "grammars-stray"

REMOVED_KEYS = ("grammar", _STRAY_TABLE, "languages")


class ManifestCleanup(PatchApplier):
    """
    Tidy an extension.toml written by an earlier port on an open bot PR.

    Drops the top-level ``grammar`` key, a bare ``[grammars]`` table and
    ``[languages]``, and deletes the local grammars/ directory. The version
    was already bumped when the PR was opened.
    """

    bumps_version = False

    def apply(self, repo_dir: Path) -> bool:
        manifest = repo_dir / TOML_MANIFEST
        if not manifest.exists():
            logger.info("No %s to clean up in %s", TOML_MANIFEST, repo_dir.name)
            return False

        original = manifest.read_text(encoding="utf-8")
        text = _BARE_GRAMMARS_RE.sub(f"[{_STRAY_TABLE}]", original)
        try:
            config = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise PatchError(f"Cannot parse {TOML_MANIFEST}: {exc}") from exc

        removed = [key for key in REMOVED_KEYS if config.pop(key, None) is not None]
        if removed:
            manifest.write_text(tomli_w.dumps(config), encoding="utf-8")
            logger.info("Removed %s from %s", ", ".join(removed), TOML_MANIFEST)

        grammar_dir = repo_dir / GRAMMAR_CONFIG_DIR
        if grammar_dir.is_dir():
            shutil.rmtree(grammar_dir)
            logger.info("Removed %s/ from %s", GRAMMAR_CONFIG_DIR, repo_dir.name)
            return True
        return bool(removed)
