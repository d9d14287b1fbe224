from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .campaigns import Campaign
from .git_urls import github_https_url
from .hosting import FORK_REMOTE, GitClient, Platform
from .state import PullRequestState, RepoHandle, RepoOutcome, RepoRef

logger = logging.getLogger(__name__)


class PullRequestPublisher:
    """
    Turn the patched working tree of a clone into a pull request.

    Create path: fork -> fork remote -> new branch -> stage -> commit -> push
    -> open PR. Update path (a bot PR is already open): the PR branch was
    checked out by `checkout_existing` before patching, so publishing only
    stages, commits and pushes onto it.

    "Nothing to commit" and "PR already exists" are outcomes, not errors.
    """

    def __init__(
        self,
        platform: Platform,
        git: GitClient,
        campaign: Campaign,
        *,
        bot_username: str,
        issue_url: str,
        source_url: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.platform = platform
        self.git = git
        self.campaign = campaign
        self.bot_username = bot_username
        self.issue_url = issue_url
        self.source_url = source_url
        self._clock = clock

    def new_branch_name(self) -> str:
        return f"{self.campaign.branch_prefix}-{int(self._clock() * 1000)}"

    def fork_url(self, ref: RepoRef) -> str:
        return github_https_url(self.bot_username, ref.name)

    def checkout_existing(self, handle: RepoHandle, branch: str) -> None:
        logger.info("Checking out existing PR branch %s for %s", branch, handle.ref.slug)
        self.git.ensure_remote(handle.root, FORK_REMOTE, self.fork_url(handle.ref))
        self.git.checkout_remote_branch(handle.root, FORK_REMOTE, branch)

    def publish(self, handle: RepoHandle, pr_state: PullRequestState) -> RepoOutcome:
        ref = handle.ref
        if pr_state.exists and pr_state.branch_name:
            branch = pr_state.branch_name
            logger.info("Updating PR branch %s for %s", branch, ref.slug)
        else:
            logger.info("Opening PR for %s", ref.slug)
            self.platform.fork(ref)
            self.git.ensure_remote(handle.root, FORK_REMOTE, self.fork_url(ref))
            branch = self.new_branch_name()
            self.git.create_branch(handle.root, branch)

        diff = self.git.diff(handle.root)
        if diff:
            logger.info("Changes for %s:\n%s", ref.slug, diff)

        self.git.stage_all(handle.root)
        if not self.git.commit(handle.root, self.campaign.commit_message):
            logger.info("Nothing to commit for %s, skipping push", ref.slug)
            return RepoOutcome.NOTHING_TO_COMMIT

        self.git.push(handle.root, FORK_REMOTE, branch)

        if pr_state.exists:
            logger.info("Updated PR branch for %s", ref.slug)
            return RepoOutcome.UPDATED

        pr_url = self.platform.create_pr(
            ref,
            head=f"{self.bot_username}:{branch}",
            title=self.campaign.pr_title,
            body=self.campaign.pr_body(self.issue_url, self.source_url),
            cwd=handle.root,
        )
        if pr_url is None:
            return RepoOutcome.ALREADY_OPEN
        logger.info("Pull request created: %s", pr_url)
        return RepoOutcome.OPENED
