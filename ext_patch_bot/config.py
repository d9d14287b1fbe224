from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .campaigns import Campaign, get_campaign
from .workspace import DEFAULT_WORKING_DIR


@dataclass(frozen=True)
class BotConfig:
    campaign: Campaign
    issue_url: str
    working_dir: Path = DEFAULT_WORKING_DIR
    backend: str = "cli"
    limit: Optional[int] = None
    retry: bool = True
    source_url: Optional[str] = None
    github_token: Optional[str] = None

    @classmethod
    def from_args(
        cls, args: argparse.Namespace, environ: Mapping[str, str]
    ) -> BotConfig:
        """
        Merge command-line arguments with environment settings.

        - BOT_WORKING_DIR / BOT_BACKEND apply when the flag is not given
        - BOT_SOURCE_URL is linked from PR bodies
        - GITHUB_TOKEN is only required by the api backend
        """
        campaign = get_campaign(args.campaign)
        if args.limit is not None and args.limit < 1:
            raise ValueError("--limit must be at least 1")
        return cls(
            campaign=campaign,
            issue_url=args.issue_url or campaign.issue_url,
            working_dir=Path(
                args.working_dir
                or environ.get("BOT_WORKING_DIR")
                or DEFAULT_WORKING_DIR
            ),
            backend=(args.backend or environ.get("BOT_BACKEND") or "cli").lower(),
            limit=args.limit,
            retry=not args.no_retry,
            source_url=environ.get("BOT_SOURCE_URL") or None,
            github_token=environ.get("GITHUB_TOKEN") or None,
        )
