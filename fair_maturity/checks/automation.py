"""Testing and CI/CD checks."""

from __future__ import annotations

import re

from fair_maturity.checks.base import (
    CheckContext,
    CheckOutcome,
    first_existing_path,
    met,
    require,
    search_first,
    unmet,
)

TEST_PATHS = ("tests", "test", "spec", "tox.ini", "pytest.ini", "jest.config.js")
TEST_CODE_PATTERNS = (
    "def test_",
    "import pytest",
    "import unittest",
    "describe(",
    "@Test",
    "testthat",
)
DEPLOYMENT_RE = re.compile(r"deploy|release|publish|(?<![a-z])cd(?![a-z])", re.IGNORECASE)


async def check_continuous_integration(ctx: CheckContext) -> CheckOutcome:
    workflows = require(await ctx.client.list_workflows(ctx.repo), "workflows")
    active = [w for w in workflows if w.state == "active"]
    if not active:
        return unmet("No active CI workflow")
    tests = await first_existing_path(ctx, TEST_PATHS)
    if not tests.met:
        return tests
    return met(f"Workflow '{active[0].name}' and {tests.evidence}")


async def check_automated_tests(ctx: CheckContext) -> CheckOutcome:
    pattern = await search_first(ctx, TEST_CODE_PATTERNS)
    if pattern:
        return met(f"Code search matched '{pattern}'")
    return unmet("No test code found by code search")


async def check_continuous_deployment(ctx: CheckContext) -> CheckOutcome:
    workflows = require(await ctx.client.list_workflows(ctx.repo), "workflows")
    for workflow in workflows:
        if DEPLOYMENT_RE.search(workflow.name) or DEPLOYMENT_RE.search(workflow.path):
            return met(f"Deployment workflow '{workflow.name}' ({workflow.path})")
    return unmet("No deployment workflow")


BINDINGS = [
    (15, check_continuous_integration),
    (16, check_automated_tests),
    (17, check_continuous_deployment),
]
