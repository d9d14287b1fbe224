from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic_graph import BaseNode, End, Graph, GraphRunContext

from .campaigns import Campaign
from .hosting import GitClient, Platform
from .publisher import PullRequestPublisher
from .state import PullRequestState, RepoOutcome, RepoRef, RepoRunState
from .versioning import bump_manifest_version
from .workspace import WorkspaceManager

logger = logging.getLogger(__name__)


@dataclass
class PipelineDeps:
    platform: Platform
    git: GitClient
    workspace: WorkspaceManager
    campaign: Campaign
    publisher: PullRequestPublisher
    bot_username: str


Ctx = GraphRunContext[RepoRunState, PipelineDeps]


@dataclass
class ResolveRepo(BaseNode[RepoRunState, PipelineDeps, RepoOutcome]):
    async def run(self, ctx: Ctx) -> CheckExistingPR:
        ref = ctx.state.ref
        owner, name = ctx.deps.platform.resolve_repo(ref.owner, ref.name)
        if (owner, name) != (ref.owner, ref.name):
            logger.info("%s is now %s/%s", ref.slug, owner, name)
        ctx.state.ref = ref.with_identity(owner, name)
        return CheckExistingPR()


@dataclass
class CheckExistingPR(BaseNode[RepoRunState, PipelineDeps, RepoOutcome]):
    async def run(self, ctx: Ctx) -> CloneRepo | End[RepoOutcome]:
        ref = ctx.state.ref
        branch = ctx.deps.platform.existing_pr_branch(ref, ctx.deps.bot_username)
        if branch is None:
            if ctx.deps.campaign.existing_only:
                logger.info("Skipping %s as there is no open PR to update", ref.slug)
                return End(RepoOutcome.NO_OPEN_PR)
            return CloneRepo()

        ctx.state.pr_state = PullRequestState(exists=True, branch_name=branch)
        if not ctx.deps.campaign.update_existing:
            logger.info("Skipping %s as PR already exists (%s)", ref.slug, branch)
            return End(RepoOutcome.ALREADY_OPEN)
        logger.info("Found existing PR for %s on %s: updating it", ref.slug, branch)
        return CloneRepo()


@dataclass
class CloneRepo(BaseNode[RepoRunState, PipelineDeps, RepoOutcome]):
    async def run(self, ctx: Ctx) -> ApplyPatch:
        ref = ctx.state.ref
        target = ctx.deps.workspace.clone_target(ref)
        ctx.deps.platform.clone(ref, target)
        handle = ctx.deps.workspace.handle_for(ref)
        ctx.state.handle = handle

        pr_state = ctx.state.pr_state
        if pr_state.exists and pr_state.branch_name:
            ctx.deps.publisher.checkout_existing(handle, pr_state.branch_name)
        return ApplyPatch()


@dataclass
class ApplyPatch(BaseNode[RepoRunState, PipelineDeps, RepoOutcome]):
    async def run(self, ctx: Ctx) -> BumpVersion | PublishChanges | End[RepoOutcome]:
        handle = ctx.state.handle
        assert handle is not None
        patch = ctx.deps.campaign.patch_factory()
        changed = ctx.deps.workspace.with_repo_dir(handle, lambda h: patch.apply(h.root))
        if not changed:
            logger.info("Skipping %s as there are no changes", handle.ref.slug)
            return End(RepoOutcome.UNCHANGED)
        if patch.bumps_version:
            return BumpVersion()
        return PublishChanges()


@dataclass
class BumpVersion(BaseNode[RepoRunState, PipelineDeps, RepoOutcome]):
    async def run(self, ctx: Ctx) -> PublishChanges:
        handle = ctx.state.handle
        assert handle is not None
        bump_manifest_version(handle.root)
        return PublishChanges()


@dataclass
class PublishChanges(BaseNode[RepoRunState, PipelineDeps, RepoOutcome]):
    async def run(self, ctx: Ctx) -> End[RepoOutcome]:
        handle = ctx.state.handle
        assert handle is not None
        outcome = ctx.deps.publisher.publish(handle, ctx.state.pr_state)
        return End(outcome)


def build_repo_pipeline_graph() -> Graph:
    return Graph(
        nodes=[
            ResolveRepo,
            CheckExistingPR,
            CloneRepo,
            ApplyPatch,
            BumpVersion,
            PublishChanges,
        ],
        state_type=RepoRunState,
    )


async def run_repo_pipeline(ref: RepoRef, deps: PipelineDeps) -> RepoOutcome:
    """Run one full attempt for ``ref``, starting from a fresh state."""
    graph = build_repo_pipeline_graph()
    result = await graph.run(
        start_node=ResolveRepo(), state=RepoRunState(ref=ref), deps=deps
    )
    return result.output
