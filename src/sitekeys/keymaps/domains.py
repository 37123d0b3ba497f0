"""URL predicates restricting a binding to one site (and its subdomains)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

GLOBAL_DOMAIN = "global"
DEFAULT_PATH = "(/.*)?"

_SUBDOMAINS = r"(([a-zA-Z0-9_-]+\.)*)"


def domain_regex(domain: str, path: str = DEFAULT_PATH) -> str:
    """Return the regex source matching ``domain`` under http(s) and any subdomain.

    Only the start of the URL is anchored; ``path`` carries its own ``$`` when an
    exact path is wanted.
    """

    if not domain:
        raise ValueError("domain cannot be empty")
    return rf"^http(s)?://{_SUBDOMAINS}({re.escape(domain)}){path}"


@dataclass(frozen=True, slots=True)
class DomainPredicate:
    """Compiled domain/path restriction handed to the host with a binding."""

    domain: str
    path: str = DEFAULT_PATH
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.domain == GLOBAL_DOMAIN:
            raise ValueError("the global domain has no predicate")
        object.__setattr__(
            self, "pattern", re.compile(domain_regex(self.domain, self.path))
        )

    @property
    def source(self) -> str:
        return self.pattern.pattern

    def matches(self, url: str) -> bool:
        return self.pattern.match(url) is not None

    def __call__(self, url: str) -> bool:
        return self.matches(url)


def predicate_for(domain: str, path: str | None = None) -> DomainPredicate | None:
    """``None`` for the global scope, otherwise a compiled ``DomainPredicate``."""

    if domain == GLOBAL_DOMAIN:
        return None
    return DomainPredicate(domain, path if path is not None else DEFAULT_PATH)


__all__ = [
    "DEFAULT_PATH",
    "GLOBAL_DOMAIN",
    "DomainPredicate",
    "domain_regex",
    "predicate_for",
]
