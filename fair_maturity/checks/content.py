"""Checks that look for specific statements inside the README."""

from __future__ import annotations

import re

from fair_maturity.checks.base import (
    CheckContext,
    CheckOutcome,
    fetch_readme,
    met,
    require,
    search_text,
    unmet,
)

OPERATING_SYSTEM_RE = re.compile(
    r"\b(linux|ubuntu|debian|macos|mac os|os x|windows|unix|posix)\b", re.IGNORECASE
)
PERSISTENT_ID_RE = re.compile(
    r"\b(?:doi:|10\.\d{4,9}/\S+|zenodo|swh:|swhid|citation)", re.IGNORECASE
)

_NO_README = "Repository has no README"


async def check_operating_systems(ctx: CheckContext) -> CheckOutcome:
    readme = await fetch_readme(ctx)
    if readme is None:
        return unmet(_NO_README)
    found = search_text(OPERATING_SYSTEM_RE, readme)
    if found:
        return met(f"README mentions '{found}'")
    return unmet("README names no operating system")


async def check_programming_languages(ctx: CheckContext) -> CheckOutcome:
    languages = require(await ctx.client.list_languages(ctx.repo), "repository languages")
    if not languages:
        return unmet("Repository has no detected language")
    readme = await fetch_readme(ctx)
    if readme is None:
        return unmet(_NO_README)
    for language in languages:
        if re.search(rf"(?<![\w]){re.escape(language)}(?![\w])", readme, re.IGNORECASE):
            return met(f"README mentions {language}")
    return unmet(f"README mentions none of: {', '.join(languages)}")


async def check_persistent_identifier(ctx: CheckContext) -> CheckOutcome:
    readme = await fetch_readme(ctx)
    if readme is None:
        return unmet(_NO_README)
    found = search_text(PERSISTENT_ID_RE, readme)
    if found:
        return met(f"README references '{found}'")
    return unmet("README has no DOI or SWHID reference")


BINDINGS = [
    (12, check_operating_systems),
    (13, check_programming_languages),
    (25, check_persistent_identifier),
]
