from __future__ import annotations

import asyncio
from pathlib import Path

from ext_patch_bot.campaigns import get_campaign
from ext_patch_bot.config import BotConfig
from ext_patch_bot.retry import never_retry
from ext_patch_bot.state import RepoOutcome, RepoRef
from ext_patch_bot.workflow import run_workflow

from conftest import FakeGit, FakePlatform

OLD = "scrollbar_thumb.background"


def _repo_files() -> dict:
    return {
        "themes/t.json": f'{{"{OLD}": "#111"}}',
        "extension.toml": 'id = "t"\nname = "T"\nversion = "1.0.0"\n',
    }


def _config(tmp_path: Path, **overrides) -> BotConfig:
    campaign = get_campaign("scrollbar-thumb")
    return BotConfig(
        campaign=campaign,
        issue_url=campaign.issue_url,
        working_dir=tmp_path / "work",
        **overrides,
    )


def test_failed_repo_does_not_stop_the_run(tmp_path: Path) -> None:
    repos = [
        RepoRef("alice", "gone", "https://github.com/alice/gone"),
        RepoRef("bob", "theme", "https://github.com/bob/theme"),
    ]
    platform = FakePlatform(
        missing=[("alice", "gone")], files={"bob/theme": _repo_files()}
    )
    git = FakeGit()

    summary = asyncio.run(
        run_workflow(
            _config(tmp_path),
            repos=repos,
            platform=platform,
            git=git,
            should_retry=never_retry,
        )
    )

    assert summary.outcomes == {
        "alice/gone": RepoOutcome.ABANDONED,
        "bob/theme": RepoOutcome.OPENED,
    }
    toml = (tmp_path / "work" / "bob__theme" / "extension.toml").read_text(encoding="utf-8")
    assert 'version = "1.0.1"' in toml


def test_retry_reruns_the_whole_pipeline(tmp_path: Path) -> None:
    platform = FakePlatform(files={"bob/theme": _repo_files()})
    git = FakeGit()
    failures = iter([RuntimeError("push rejected")])
    original_push = git.push

    def _push_once_failing(repo, remote, branch):
        for exc in failures:
            raise exc
        original_push(repo, remote, branch)

    git.push = _push_once_failing

    summary = asyncio.run(
        run_workflow(
            _config(tmp_path),
            repos=[RepoRef("bob", "theme", "https://github.com/bob/theme")],
            platform=platform,
            git=git,
            should_retry=lambda exc: True,
        )
    )

    assert summary.outcomes == {"bob/theme": RepoOutcome.OPENED}
    assert platform.names().count("clone") == 2
    assert platform.names().count("resolve") == 2
    # The second attempt starts from a fresh clone, so the bump happens once.
    toml = (tmp_path / "work" / "bob__theme" / "extension.toml").read_text(encoding="utf-8")
    assert 'version = "1.0.1"' in toml


def test_limit_caps_processed_repos(tmp_path: Path) -> None:
    repos = [RepoRef("o", f"r{i}", f"https://github.com/o/r{i}") for i in range(3)]
    platform = FakePlatform(files={r.slug: _repo_files() for r in repos})

    summary = asyncio.run(
        run_workflow(
            _config(tmp_path, limit=2),
            repos=repos,
            platform=platform,
            git=FakeGit(),
            should_retry=never_retry,
        )
    )

    assert list(summary.outcomes) == ["o/r0", "o/r1"]
    assert summary.count(RepoOutcome.OPENED) == 2


def test_workspace_is_recreated(tmp_path: Path) -> None:
    stale = tmp_path / "work" / "old-clone"
    stale.mkdir(parents=True)

    asyncio.run(
        run_workflow(
            _config(tmp_path),
            repos=[],
            platform=FakePlatform(),
            git=FakeGit(),
            should_retry=never_retry,
        )
    )

    assert not stale.exists()
    assert (tmp_path / "work").is_dir()
