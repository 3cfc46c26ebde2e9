"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from fair_maturity.checks import get_default_registry
from fair_maturity.checks.base import CheckContext
from fair_maturity.config import Settings
from fair_maturity.config.eval_config import EvalConfig, load_eval_config
from fair_maturity.evaluator import RateLimitStatus
from fair_maturity.evaluator.criteria import CriteriaCatalog, get_default_catalog
from fair_maturity.repository.client import (
    Contributor,
    PullRequest,
    Release,
    RepositoryMetadata,
    Review,
    Workflow,
)
from fair_maturity.repository.identifier import RepositoryRef, parse_repository
from tests.fixtures.fake_client import FakeRepositoryClient

README = """# Widgets

A Python toolkit for widgets. Runs on Linux, macOS and Windows.

Cite as doi:10.5281/zenodo.1234567.
"""

CHANGELOG = """# Changelog

## [1.1.0] - 2024-03-01
- Added gizmos

## [1.0.0] - 2024-01-01
- First release
"""


@pytest.fixture
def repo() -> RepositoryRef:
    return parse_repository("octo/widgets")


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, github_token=None, community_members=["alice"])


@pytest.fixture
def eval_config() -> EvalConfig:
    """Default scoring configuration."""
    return load_eval_config()


@pytest.fixture
def catalog() -> CriteriaCatalog:
    return get_default_catalog()


@pytest.fixture
def registry():
    return get_default_registry()


@pytest.fixture
def mature_client() -> FakeRepositoryClient:
    """A repository satisfying every automated check."""
    return FakeRepositoryClient(
        metadata=RepositoryMetadata(
            full_name="octo/widgets",
            html_url="https://github.com/octo/widgets",
            description="Widgets",
            license="MIT",
            topics=["research-software", "widgets"],
            has_issues=True,
            default_branch="main",
        ),
        paths={
            "README.md",
            "pyproject.toml",
            "CONTRIBUTING.md",
            ".github/ISSUE_TEMPLATE",
            "CITATION.cff",
            "CODE_OF_CONDUCT.md",
            "codemeta.json",
            "SECURITY.md",
            "tests",
        },
        text_files={"CHANGELOG.md": CHANGELOG},
        readme=README,
        languages={"Python": 52000, "Shell": 300},
        contributors=[
            Contributor(login="octo", contributions=120),
            Contributor(login="alice", contributions=40),
            Contributor(login="carol", contributions=5),
            Contributor(login="dependabot[bot]", type="Bot", contributions=12),
        ],
        pull_requests=[
            PullRequest(number=7, title="Add gizmos", state="closed", author="carol"),
            PullRequest(number=6, title="Fix typo", state="closed", author="alice"),
        ],
        reviews={7: [Review(reviewer="octo", state="APPROVED")]},
        releases=[Release(tag_name="v1.1.0", name="1.1.0", body="Added gizmos")],
        workflows=[
            Workflow(name="CI", path=".github/workflows/ci.yml"),
            Workflow(name="Publish to PyPI", path=".github/workflows/publish.yml"),
        ],
        search_hits={"def test_"},
        rate_limit=RateLimitStatus(core_limit=5000, core_remaining=4990, search_limit=30, search_remaining=29),
    )


@pytest.fixture
def bare_client() -> FakeRepositoryClient:
    """A reachable repository with nothing in it."""
    return FakeRepositoryClient(
        metadata=RepositoryMetadata(full_name="octo/widgets", html_url="https://github.com/octo/widgets"),
    )


@pytest.fixture
def unreachable_client() -> FakeRepositoryClient:
    return FakeRepositoryClient(metadata=None)


@pytest.fixture
def make_context(repo, settings):
    def _make(client) -> CheckContext:
        return CheckContext(
            client=client,
            repo=repo,
            community_members=frozenset(settings.community_members),
            pull_request_sample_size=settings.pull_request_sample_size,
        )

    return _make

