from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .patches import (
    AttributeRename,
    LegacyManifestRemoval,
    ManifestCleanup,
    ManifestPort,
    PatchApplier,
)

EXTENSIONS_ISSUES = "https://github.com/zed-industries/extensions/issues"


@dataclass(frozen=True)
class Campaign:
    """One tracking issue plus everything needed to patch and PR its repos."""

    name: str
    issue_url: str
    patch_factory: Callable[[], PatchApplier]
    commit_message: str
    pr_title: str
    pr_summary: str
    branch_prefix: str
    # Push onto an already-open bot PR instead of leaving the repo alone.
    update_existing: bool = False
    # Only follow up on repos that already have an open bot PR.
    existing_only: bool = False

    def pr_body(self, issue_url: str, source_url: Optional[str] = None) -> str:
        lines = [
            self.pr_summary,
            f"See {issue_url}",
            "",
            "This change was generated automatically and needs to be manually tested.",
        ]
        if source_url:
            lines.append(f"Bot script: {source_url}")
        return "\n".join(lines)


CAMPAIGNS: Dict[str, Campaign] = {
    c.name: c
    for c in (
        Campaign(
            name="scrollbar-thumb",
            issue_url=f"{EXTENSIONS_ISSUES}/2101",
            patch_factory=lambda: AttributeRename(
                "scrollbar_thumb.background", "scrollbar.thumb.background"
            ),
            commit_message="rename scrollbar_thumb.background to scrollbar.thumb.background",
            pr_title="Rename scrollbar_thumb.background to scrollbar.thumb.background",
            pr_summary="This PR renames the theme attribute 'scrollbar_thumb.background' "
            "to 'scrollbar.thumb.background'.",
            branch_prefix="update-attr",
        ),
        Campaign(
            name="extension-toml",
            issue_url=f"{EXTENSIONS_ISSUES}/2104",
            patch_factory=ManifestPort,
            commit_message="Add extension.toml",
            pr_title="Add extension.toml",
            pr_summary="This PR adds 'extension.toml' file, converting from the existing "
            "'extension.json' configuration.",
            branch_prefix="add-extension-toml",
        ),
        Campaign(
            name="remove-extension-json",
            issue_url=f"{EXTENSIONS_ISSUES}/2104",
            patch_factory=LegacyManifestRemoval,
            commit_message="Remove extension.json",
            pr_title="Remove extension.json",
            pr_summary="This PR removes 'extension.json' now that 'extension.toml' "
            "describes the extension.",
            branch_prefix="remove-extension-json",
            update_existing=True,
            existing_only=True,
        ),
        Campaign(
            name="manifest-cleanup",
            issue_url=f"{EXTENSIONS_ISSUES}/2104",
            patch_factory=ManifestCleanup,
            commit_message="cleanup",
            pr_title="Clean up extension.toml",
            pr_summary="This PR removes the 'grammar' key, the stray '[grammars]' and "
            "'[languages]' tables from 'extension.toml' and deletes the 'grammars' folder.",
            branch_prefix="cleanup-extension-toml",
            update_existing=True,
            existing_only=True,
        ),
    )
}


def get_campaign(name: str) -> Campaign:
    try:
        return CAMPAIGNS[name]
    except KeyError:
        raise ValueError(f"Unknown campaign: {name}") from None
