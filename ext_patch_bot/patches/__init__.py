from __future__ import annotations

from .attribute_rename import AttributeRename
from .base import PatchApplier
from .legacy_manifest import LegacyManifestRemoval
from .manifest_cleanup import ManifestCleanup
from .manifest_port import ManifestPort, kebab_case

__all__ = [
    "AttributeRename",
    "LegacyManifestRemoval",
    "ManifestCleanup",
    "ManifestPort",
    "PatchApplier",
    "kebab_case",
]
