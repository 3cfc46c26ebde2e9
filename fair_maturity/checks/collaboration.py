"""Checks on contributors, pull requests and reviews."""

from __future__ import annotations

from fair_maturity.checks.base import CheckContext, CheckOutcome, met, require, unmet
from fair_maturity.repository.client import Contributor


def _community(ctx: CheckContext) -> set[str]:
    return {ctx.repo.owner.lower(), *(m.lower() for m in ctx.community_members)}


def _humans(contributors: list[Contributor]) -> list[Contributor]:
    return [c for c in contributors if c.login and not c.is_bot]


async def check_identified_collaborators(ctx: CheckContext) -> CheckOutcome:
    contributors = require(await ctx.client.list_contributors(ctx.repo), "contributors")
    if not contributors:
        return unmet("Repository lists no contributors")
    anonymous = [c for c in contributors if not c.login]
    if anonymous:
        return unmet(f"{len(anonymous)} contributor(s) are not linked to an account")
    return met(f"{len(contributors)} identified contributor(s)")


async def check_pull_requests(ctx: CheckContext) -> CheckOutcome:
    pulls = require(await ctx.client.list_pull_requests(ctx.repo), "pull requests")
    if pulls:
        return met(f"{len(pulls)} recent pull request(s), latest #{pulls[0].number}")
    return unmet("No pull requests")


async def check_reviewed_pull_requests(ctx: CheckContext) -> CheckOutcome:
    pulls = require(await ctx.client.list_pull_requests(ctx.repo), "pull requests")
    if not pulls:
        return unmet("No pull requests to review")
    for pull in pulls[: ctx.pull_request_sample_size]:
        reviews = require(
            await ctx.client.list_pull_request_reviews(ctx.repo, pull.number),
            f"reviews of pull request #{pull.number}",
        )
        if reviews:
            return met(f"Pull request #{pull.number} has {len(reviews)} review(s)")
    return unmet(f"None of the last {min(len(pulls), ctx.pull_request_sample_size)} pull requests was reviewed")


async def check_community_collaborators(ctx: CheckContext) -> CheckOutcome:
    if not ctx.community_members:
        return unmet(error="community member list is not configured")
    contributors = require(await ctx.client.list_contributors(ctx.repo), "contributors")
    community = _community(ctx)
    members = [c.login for c in _humans(contributors) if c.login.lower() in community]
    if len(members) >= 2:
        return met(f"Community collaborators: {', '.join(members)}")
    return unmet(f"{len(members)} collaborator(s) from the hosting community")


async def check_external_collaborators(ctx: CheckContext) -> CheckOutcome:
    contributors = require(await ctx.client.list_contributors(ctx.repo), "contributors")
    humans = _humans(contributors)
    community = _community(ctx)
    outsiders = [c.login for c in humans if c.login.lower() not in community]
    if len(humans) >= 2 and outsiders:
        return met(f"External collaborators: {', '.join(outsiders)}")
    return unmet(f"{len(humans)} collaborator(s), {len(outsiders)} from outside the community")


BINDINGS = [
    (36, check_identified_collaborators),
    (41, check_pull_requests),
    (42, check_reviewed_pull_requests),
    (35, check_community_collaborators),
    (34, check_external_collaborators),
]
