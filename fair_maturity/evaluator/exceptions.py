"""Custom exception hierarchy for the compliance evaluation pipeline."""

from __future__ import annotations

from collections.abc import Mapping


class EvaluatorError(Exception):
    """Base exception for all evaluator errors.

    Args:
        message: Human-readable error description.
        context: Optional dict of extra context for logging/debugging.
    """

    def __init__(self, message: str = "", context: dict | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class InputError(EvaluatorError):
    """Raised when caller input (repository identifier, target level) is malformed.

    This is the only error that aborts an evaluation, and it is always raised
    before any network access.
    """


class UnreachableTargetError(EvaluatorError):
    """Raised when the repository under evaluation cannot be found or read."""


class CheckFailure(EvaluatorError):
    """Raised by a check function when it cannot reach a verdict."""


class QuotaExceededError(CheckFailure):
    """Raised when the code-search quota of the hosting platform is exhausted."""


class ConfigurationError(EvaluatorError):
    """Raised when configuration loading or validation fails."""


class CatalogError(ConfigurationError):
    """Raised when the criteria catalog is malformed (e.g. duplicate ids)."""


class RegistryError(ConfigurationError):
    """Raised when check bindings do not match the criteria catalog."""


# ── Rate limit detection ─────────────────────────────

# Message substrings the hosting platform uses when a quota is exhausted.
# The search API has a far lower quota than the core API, so these show up
# on search requests long before anything else.
_RATE_LIMIT_PATTERNS: list[str] = [
    "rate limit",
    "secondary rate limit",
    "api rate limit exceeded",
    "too many requests",
    "abuse detection",
]


def is_rate_limit_error(
    status_code: int | None,
    headers: Mapping[str, str] | None = None,
    message: str = "",
) -> bool:
    """Return True if an HTTP failure indicates quota exhaustion.

    Args:
        status_code: HTTP status of the failed response, if any.
        headers: Response headers (``X-RateLimit-Remaining`` is inspected).
        message: Response body or error text.

    Returns:
        True for 429 responses, and for 403 responses whose remaining quota
        is zero or whose message mentions a rate limit.
    """
    if status_code == 429:
        return True
    if status_code != 403:
        return False
    if headers is not None and headers.get("x-ratelimit-remaining") == "0":
        return True
    lowered = message.lower()
    return any(pattern in lowered for pattern in _RATE_LIMIT_PATTERNS)


def format_quota_error(resource: str, reset_at: str | None = None) -> str:
    """Format an actionable quota message for a per-criterion error string.

    Args:
        resource: The exhausted API resource (``"search"``, ``"core"``).
        reset_at: Optional human-readable reset time.

    Returns:
        A message telling the caller the check could not be verified and why.
    """
    message = f"{resource} API rate limit exceeded; the criterion could not be verified"
    if reset_at:
        message += f" (quota resets at {reset_at})"
    return message + ". Provide an access token or retry later."
