"""Hosting-platform access: identifiers, client contract, cache, GitHub binding."""

from __future__ import annotations

from fair_maturity.repository.cache import CachedRepositoryClient, ResultCache
from fair_maturity.repository.client import (
    Contributor,
    Outcome,
    PullRequest,
    Release,
    RepositoryClient,
    RepositoryMetadata,
    Review,
    Workflow,
)
from fair_maturity.repository.github import GitHubClient
from fair_maturity.repository.identifier import RepositoryRef, parse_repository

__all__ = [
    "CachedRepositoryClient",
    "Contributor",
    "GitHubClient",
    "Outcome",
    "PullRequest",
    "Release",
    "RepositoryClient",
    "RepositoryMetadata",
    "RepositoryRef",
    "Review",
    "ResultCache",
    "Workflow",
    "parse_repository",
]
