"""Checks satisfied by the presence of a conventional file in the repository."""

from __future__ import annotations

from fair_maturity.checks.base import CheckContext, CheckOutcome, first_existing_path

README_FILES = ("README.md", "README.rst", "README.txt", "README")
DOCUMENTATION_PATHS = (*README_FILES, "docs")
MANIFEST_FILES = (
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "package.json",
    "requirements.txt",
    "environment.yml",
    "DESCRIPTION",
    "Cargo.toml",
    "pom.xml",
)
CONTRIBUTING_FILES = (
    "CONTRIBUTING.md",
    ".github/CONTRIBUTING.md",
    "docs/CONTRIBUTING.md",
    "CONTRIBUTING.rst",
)
CHANGELOG_FILES = (
    "CHANGELOG.md",
    "CHANGELOG.rst",
    "CHANGELOG",
    "CHANGES.md",
    "HISTORY.md",
    "NEWS.md",
)
ISSUE_TEMPLATE_PATHS = (
    ".github/ISSUE_TEMPLATE",
    ".github/ISSUE_TEMPLATE.md",
    "ISSUE_TEMPLATE.md",
    "docs/ISSUE_TEMPLATE.md",
)
CODE_OF_CONDUCT_FILES = (
    "CODE_OF_CONDUCT.md",
    ".github/CODE_OF_CONDUCT.md",
    "docs/CODE_OF_CONDUCT.md",
)
SECURITY_FILES = ("SECURITY.md", ".github/SECURITY.md", "docs/SECURITY.md")
METADATA_FILES = ("codemeta.json", ".zenodo.json")


async def check_basic_documentation(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, DOCUMENTATION_PATHS)


async def check_readme(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, README_FILES)


async def check_dependency_manifest(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, MANIFEST_FILES)


async def check_contributing_guide(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, CONTRIBUTING_FILES)


async def check_changelog(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, CHANGELOG_FILES)


async def check_issue_templates(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, ISSUE_TEMPLATE_PATHS)


async def check_citation_file(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, ("CITATION.cff",))


async def check_code_of_conduct(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, CODE_OF_CONDUCT_FILES)


async def check_machine_readable_metadata(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, METADATA_FILES)


async def check_security_policy(ctx: CheckContext) -> CheckOutcome:
    return await first_existing_path(ctx, SECURITY_FILES)


BINDINGS = [
    (11, check_basic_documentation),
    (32, check_readme),
    (14, check_dependency_manifest),
    (37, check_contributing_guide),
    (49, check_changelog),
    (39, check_issue_templates),
    (55, check_citation_file),
    (59, check_code_of_conduct),
    (30, check_machine_readable_metadata),
    (43, check_security_policy),
]
