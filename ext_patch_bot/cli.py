import argparse
import asyncio
import os

from .campaigns import CAMPAIGNS
from .config import BotConfig
from .hosting import BACKENDS
from .logging_config import configure_logging
from .workflow import run_workflow


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ext-patch-bot",
        description="Patch the repos listed in a tracking issue and open pull requests.",
    )
    parser.add_argument("--campaign", required=True, choices=sorted(CAMPAIGNS))
    parser.add_argument("--issue-url", help="Override the campaign's tracking issue")
    parser.add_argument("--working-dir", help="Scratch directory (default: work)")
    parser.add_argument("--backend", choices=BACKENDS)
    parser.add_argument("--limit", type=int, help="Only process the first N repos")
    parser.add_argument(
        "--no-retry",
        action="store_true",
        help="Skip failed repos instead of asking whether to retry",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, force=True)
    config = BotConfig.from_args(args, os.environ)
    asyncio.run(run_workflow(config))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
