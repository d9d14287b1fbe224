from __future__ import annotations

import functools
import logging
from typing import List, Optional

from .config import BotConfig
from .hosting import GitClient, Platform, get_backend
from .logging_config import ensure_logging_configured
from .pipeline import PipelineDeps, run_repo_pipeline
from .publisher import PullRequestPublisher
from .retry import RetryDecision, never_retry, prompt_operator, retry_until_declined
from .source_lister import list_source_repos
from .state import RepoOutcome, RepoRef, RunSummary
from .workspace import WorkspaceManager

logger = logging.getLogger(__name__)


async def run_workflow(
    config: BotConfig,
    *,
    repos: Optional[List[RepoRef]] = None,
    platform: Optional[Platform] = None,
    git: Optional[GitClient] = None,
    should_retry: Optional[RetryDecision] = None,
) -> RunSummary:
    """
    Process every repo of the campaign's tracking issue, one at a time.

    A failing repo goes through the retry decision and is then left behind;
    it never stops the rest of the run.
    """
    ensure_logging_configured()
    if platform is None or git is None:
        default_platform, default_git = get_backend(
            config.backend, token=config.github_token
        )
        platform = platform or default_platform
        git = git or default_git
    if should_retry is None:
        should_retry = prompt_operator if config.retry else never_retry

    if repos is None:
        repos = list_source_repos(config.issue_url)
    if config.limit is not None:
        repos = repos[: config.limit]

    workspace = WorkspaceManager(config.working_dir)
    workspace.create()

    username = platform.current_user()
    logger.info("Using GitHub username: %s", username)

    publisher = PullRequestPublisher(
        platform,
        git,
        config.campaign,
        bot_username=username,
        issue_url=config.issue_url,
        source_url=config.source_url,
    )
    deps = PipelineDeps(
        platform=platform,
        git=git,
        workspace=workspace,
        campaign=config.campaign,
        publisher=publisher,
        bot_username=username,
    )

    summary = RunSummary()
    for index, ref in enumerate(repos):
        logger.info("[%d] Processing repo %s", index, ref.slug)
        outcome = await retry_until_declined(
            functools.partial(run_repo_pipeline, ref, deps),
            should_retry=should_retry,
            label=ref.slug,
        )
        summary.record(ref, outcome or RepoOutcome.ABANDONED)
        logger.info("%s: %s", ref.slug, (outcome or RepoOutcome.ABANDONED).value)

    for outcome in RepoOutcome:
        count = summary.count(outcome)
        if count:
            logger.info("%s: %d repo(s)", outcome.value, count)
    return summary
