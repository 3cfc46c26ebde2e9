"""Automated check functions and their registry."""

from __future__ import annotations

from fair_maturity.checks import automation, collaboration, content, files, metadata, releases
from fair_maturity.checks.base import CheckContext, CheckFunction, CheckOutcome
from fair_maturity.checks.registry import CheckRegistry

DEFAULT_BINDINGS = [
    *metadata.BINDINGS,
    *files.BINDINGS,
    *content.BINDINGS,
    *releases.BINDINGS,
    *automation.BINDINGS,
    *collaboration.BINDINGS,
]


def get_default_registry() -> CheckRegistry:
    """Return a registry with every built-in check bound."""
    return CheckRegistry.from_bindings(DEFAULT_BINDINGS)


__all__ = [
    "CheckContext",
    "CheckFunction",
    "CheckOutcome",
    "CheckRegistry",
    "DEFAULT_BINDINGS",
    "get_default_registry",
]
