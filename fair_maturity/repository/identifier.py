"""Parse repository identifiers such as ``github.com/owner/repo.git``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from fair_maturity.evaluator.exceptions import InputError

DEFAULT_HOST = "github.com"

_OWNER = r"[A-Za-z0-9][A-Za-z0-9-]*"
_NAME = r"[A-Za-z0-9._-]+"
_IDENTIFIER_RE = re.compile(
    rf"^(?:(?P<host>[A-Za-z0-9.-]+\.[A-Za-z]{{2,}})/)?(?P<owner>{_OWNER})/(?P<name>(?!\.{{1,2}}$){_NAME})$"
)


@dataclass(frozen=True)
class RepositoryRef:
    """A repository on a hosting platform."""

    host: str
    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return f"{self.host}/{self.slug}"


def parse_repository(identifier: str) -> RepositoryRef:
    """Parse ``<host>/<owner>/<repo>[.git]`` or ``<owner>/<repo>``.

    A leading ``http://`` / ``https://`` and a trailing slash are tolerated so
    that URLs copied from a browser work.

    Raises:
        InputError: If the identifier does not match either form.
    """
    if not isinstance(identifier, str) or not identifier.strip():
        raise InputError("Repository identifier is empty", context={"identifier": identifier})

    text = identifier.strip()
    text = re.sub(r"^https?://", "", text, flags=re.IGNORECASE)
    text = text.rstrip("/")
    if text.endswith(".git"):
        text = text[: -len(".git")]

    match = _IDENTIFIER_RE.match(text)
    if match is None:
        raise InputError(
            f"Malformed repository identifier: {identifier!r}. "
            "Expected '<host>/<owner>/<repo>' or '<owner>/<repo>'.",
            context={"identifier": identifier},
        )

    return RepositoryRef(
        host=(match.group("host") or DEFAULT_HOST).lower(),
        owner=match.group("owner"),
        name=match.group("name"),
    )
