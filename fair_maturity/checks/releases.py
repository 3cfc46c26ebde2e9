"""Release management checks."""

from __future__ import annotations

import re

from fair_maturity.checks.base import CheckContext, CheckOutcome, met, require, unmet
from fair_maturity.checks.files import CHANGELOG_FILES

VERSION_HEADING_RE = re.compile(r"^#+\s*\[?v?\d+\.\d+", re.MULTILINE)


async def check_releases(ctx: CheckContext) -> CheckOutcome:
    releases = require(await ctx.client.list_releases(ctx.repo), "releases")
    published = [r for r in releases if not r.draft]
    if published:
        return met(f"{len(published)} release(s), latest {published[0].tag_name}")
    return unmet("No published releases")


async def check_release_notes(ctx: CheckContext) -> CheckOutcome:
    """Met when a release carries notes or the changelog is split by version."""
    releases = require(await ctx.client.list_releases(ctx.repo), "releases")
    for release in releases:
        if release.body and release.body.strip():
            return met(f"Release {release.tag_name} has release notes")

    for path in CHANGELOG_FILES:
        outcome = await ctx.client.get_text_file(ctx.repo, path)
        if outcome.not_found:
            continue
        text = require(outcome, path)
        if VERSION_HEADING_RE.search(text):
            return met(f"{path} lists changes per version")
    return unmet("No release notes and no versioned change log")


BINDINGS = [
    (18, check_releases),
    (50, check_release_notes),
]
