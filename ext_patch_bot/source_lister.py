from __future__ import annotations

import logging
from typing import List

import requests
from bs4 import BeautifulSoup

from .errors import SourceListError
from .git_urls import owner_and_name_from_href
from .state import RepoRef

logger = logging.getLogger(__name__)

TASK_LIST_SELECTOR = ".contains-task-list"
USER_AGENT = "ext-patch-bot"


def fetch_issue_html(issue_url: str, *, timeout: int = 30) -> str:
    logger.info("Fetching tracking issue %s", issue_url)
    response = requests.get(
        issue_url, headers={"User-Agent": USER_AGENT}, timeout=timeout
    )
    response.raise_for_status()
    return response.text


def parse_repo_refs(html: str) -> List[RepoRef]:
    """
    Read the repositories listed in the first task list of an issue page.

    Links that point back at issues are skipped; owner and name are the last
    two path segments of each remaining link. Order is kept and duplicates
    are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    task_list = soup.select_one(TASK_LIST_SELECTOR)
    if task_list is None:
        raise SourceListError("Issue page has no task list")

    refs: List[RepoRef] = []
    seen: set[tuple[str, str]] = set()
    for link in task_list.find_all("a"):
        href = link.get("href")
        if not href or "issues" in href:
            continue
        try:
            owner, name = owner_and_name_from_href(href)
        except ValueError:
            logger.warning("Skipping link that is not a repository: %s", href)
            continue
        if (owner, name) in seen:
            continue
        seen.add((owner, name))
        refs.append(RepoRef(owner=owner, name=name, source_url=href))
    return refs


def list_source_repos(issue_url: str) -> List[RepoRef]:
    refs = parse_repo_refs(fetch_issue_html(issue_url))
    logger.info("Found %d repos in %s", len(refs), issue_url)
    return refs
