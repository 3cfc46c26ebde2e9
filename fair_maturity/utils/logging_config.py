"""Logging setup for the evaluator: one stderr handler plus per-module levels."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

_DEV_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_PROD_FORMAT = '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'

# Request-level chatter from the GitHub transport and the graph runtime
_QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "langgraph",
    "langchain_core",
)


def parse_level(level: str) -> int:
    """Resolve a level name such as ``"debug"`` to its numeric value.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    levels = logging.getLevelNamesMapping()
    name = level.strip().upper()
    if name not in levels:
        raise ValueError(f"Unknown log level: {level!r}")
    return levels[name]


def setup_logging(
    level: str = "INFO",
    environment: str = "development",
    module_levels: Mapping[str, str] | None = None,
) -> None:
    """Configure application-wide logging.

    Args:
        level: Root log level (e.g. "DEBUG", "INFO", "WARNING").
        environment: One of "development", "staging", "production".
            Dev uses human-readable format; others use structured JSON-like format.
        module_levels: Per-logger overrides applied last, e.g.
            ``{"fair_maturity.checks": "DEBUG"}`` to trace individual checks, or
            ``{"httpx": "INFO"}`` to see every GitHub request.

    Raises:
        ValueError: If any level name is unknown.
    """
    fmt = _DEV_FORMAT if environment == "development" else _PROD_FORMAT
    overrides = {name: parse_level(value) for name, value in (module_levels or {}).items()}

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    root = logging.getLogger()
    root.setLevel(parse_level(level))
    root.handlers.clear()
    root.addHandler(handler)

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    for logger_name, value in overrides.items():
        logging.getLogger(logger_name).setLevel(value)
