"""Checks answered from the repository's platform metadata."""

from __future__ import annotations

from fair_maturity.checks.base import (
    CheckContext,
    CheckOutcome,
    first_existing_path,
    met,
    require,
    unmet,
)

LICENSE_FILES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING")


async def check_hosted_on_platform(ctx: CheckContext) -> CheckOutcome:
    metadata = require(await ctx.client.get_metadata(ctx.repo), "repository metadata")
    return met(f"Hosted at {metadata.html_url or ctx.repo}")


async def check_version_control(ctx: CheckContext) -> CheckOutcome:
    metadata = require(await ctx.client.get_metadata(ctx.repo), "repository metadata")
    if metadata.default_branch:
        return met(f"Git repository with default branch '{metadata.default_branch}'")
    return unmet("Repository has no default branch (no commits yet)")


async def check_open_source_license(ctx: CheckContext) -> CheckOutcome:
    metadata = require(await ctx.client.get_metadata(ctx.repo), "repository metadata")
    # "NOASSERTION" means GitHub found a license file it could not classify
    if metadata.license and metadata.license != "NOASSERTION":
        return met(f"License detected: {metadata.license}")
    return await first_existing_path(ctx, LICENSE_FILES)


async def check_keywords(ctx: CheckContext) -> CheckOutcome:
    metadata = require(await ctx.client.get_metadata(ctx.repo), "repository metadata")
    if metadata.topics:
        return met(f"Topics: {', '.join(metadata.topics)}")
    return unmet("No topics set on the repository")


async def check_issue_tracker(ctx: CheckContext) -> CheckOutcome:
    metadata = require(await ctx.client.get_metadata(ctx.repo), "repository metadata")
    if metadata.has_issues:
        return met("Issue tracker is enabled")
    return unmet("Issue tracker is disabled")


BINDINGS = [
    (8, check_hosted_on_platform),
    (29, check_version_control),
    (10, check_open_source_license),
    (24, check_keywords),
    (38, check_issue_tracker),
]
