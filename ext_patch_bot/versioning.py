"""
Patch-level version bumps for extension manifests.

Only the version value is substituted in the manifest text; the rest of
the file is written back untouched.
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path

import semver

from .errors import ManifestNotFoundError

logger = logging.getLogger(__name__)

TOML_MANIFEST = "extension.toml"
JSON_MANIFEST = "extension.json"

_TOML_VERSION_RE = re.compile(r"""^(version\s*=\s*)(["'])[^"'\n]+\2""", re.MULTILINE)
_JSON_VERSION_RE = re.compile(r'("version"\s*:\s*)(")[^"]+"')


def bump_patch(version: str) -> str:
    """Increment the patch segment, keeping pre-release and build metadata."""
    parsed = semver.Version.parse(version)
    return str(parsed.replace(patch=parsed.patch + 1))


def _rewrite_version(text: str, pattern: re.Pattern[str], new_version: str) -> str:
    updated, count = pattern.subn(
        lambda m: f"{m.group(1)}{m.group(2)}{new_version}{m.group(2)}", text, count=1
    )
    if count != 1:
        raise ValueError("Manifest has no version field to rewrite")
    return updated


def bump_manifest_version(repo_dir: Path) -> str:
    toml_path = repo_dir / TOML_MANIFEST
    json_path = repo_dir / JSON_MANIFEST

    if toml_path.exists():
        text = toml_path.read_text(encoding="utf-8")
        current = tomllib.loads(text)["version"]
        new_version = bump_patch(current)
        toml_path.write_text(
            _rewrite_version(text, _TOML_VERSION_RE, new_version), encoding="utf-8"
        )
    elif json_path.exists():
        text = json_path.read_text(encoding="utf-8")
        current = json.loads(text)["version"]
        new_version = bump_patch(current)
        json_path.write_text(
            _rewrite_version(text, _JSON_VERSION_RE, new_version), encoding="utf-8"
        )
    else:
        raise ManifestNotFoundError(
            f"Neither {TOML_MANIFEST} nor {JSON_MANIFEST} found in {repo_dir}"
        )

    logger.info("Bumped version %s -> %s in %s", current, new_version, repo_dir.name)
    return new_version
