from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path
from typing import Optional, Tuple

import tomli_w

from ..errors import PatchError
from ..versioning import JSON_MANIFEST, TOML_MANIFEST, bump_patch
from .base import PatchApplier

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
GRAMMAR_CONFIG_DIR = "grammars"

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def kebab_case(name: str) -> str:
    spaced = _CAMEL_BOUNDARY_RE.sub("-", name.strip())
    return _NON_ALNUM_RE.sub("-", spaced.lower()).strip("-")


def find_grammar_config(repo_dir: Path) -> Optional[Tuple[str, str]]:
    """Return (grammar name, raw TOML text) of the first grammar config, if any."""
    directory = repo_dir / GRAMMAR_CONFIG_DIR
    if not directory.is_dir():
        return None
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix == ".toml":
            return path.stem, path.read_text(encoding="utf-8")
    return None


class ManifestPort(PatchApplier):
    """Port extension.json to extension.toml."""

    # The port writes the bumped version itself.
    bumps_version = False

    def render(self, repo_dir: Path) -> str:
        config = json.loads((repo_dir / JSON_MANIFEST).read_text(encoding="utf-8"))
        config["id"] = kebab_case(config["name"])
        config["version"] = bump_patch(config["version"])
        config["schema_version"] = SCHEMA_VERSION

        grammar = find_grammar_config(repo_dir)
        if grammar:
            grammar_name, _ = grammar
            config["grammar"] = grammar_name

        document = tomli_w.dumps(config)
        if grammar:
            grammar_name, content = grammar
            declared = config.get("grammars")
            if isinstance(declared, dict) and grammar_name in declared:
                logger.info(
                    "%s already declares grammar %s; not embedding %s/%s.toml",
                    JSON_MANIFEST,
                    grammar_name,
                    GRAMMAR_CONFIG_DIR,
                    grammar_name,
                )
            else:
                # Embedded verbatim so the grammar config keeps its own formatting
                document += f"\n[grammars.{grammar_name}]\n{content}"

        try:
            tomllib.loads(document)
        except tomllib.TOMLDecodeError as exc:
            raise PatchError(f"Generated {TOML_MANIFEST} is not valid TOML: {exc}") from exc
        return document

    def apply(self, repo_dir: Path) -> bool:
        target = repo_dir / TOML_MANIFEST
        if target.exists():
            logger.info("Skipping existing %s", TOML_MANIFEST)
            return False

        document = self.render(repo_dir)
        logger.debug("Generated %s:\n%s", TOML_MANIFEST, document)
        target.write_text(document, encoding="utf-8")
        logger.info("Wrote %s for %s", TOML_MANIFEST, repo_dir.name)
        return True
