"""Exception hierarchy shared by the compiler, loader, and hosts."""

from __future__ import annotations


class SiteKeysError(Exception):
    """Base class for every error raised by sitekeys."""


class RegistrationError(SiteKeysError):
    """Raised by a host when a single binding cannot be applied."""

    def __init__(self, key: str, mode: str, reason: str) -> None:
        super().__init__(f"Cannot bind '{key}' in mode '{mode}': {reason}")
        self.key = key
        self.mode = mode
        self.reason = reason


class ConfigurationShapeError(SiteKeysError, ValueError):
    """Raised when a configuration section or declaration is malformed."""


class UnknownCategoryError(ConfigurationShapeError):
    """Raised when a binding names a category outside the registry."""

    def __init__(self, name: object) -> None:
        super().__init__(f"Unknown category {name!r}")
        self.name = name


__all__ = [
    "SiteKeysError",
    "RegistrationError",
    "ConfigurationShapeError",
    "UnknownCategoryError",
]
