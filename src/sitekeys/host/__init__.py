"""Host engine contracts and the in-memory implementation."""

from .memory import HostBinding, HostStats, InMemoryHost, OmnibarRequest, SearchAlias
from .protocols import (
    ClipboardHost,
    Host,
    KeyHost,
    OmnibarHost,
    SearchAliasHost,
    SettingsHost,
)

__all__ = [
    "ClipboardHost",
    "Host",
    "HostBinding",
    "HostStats",
    "InMemoryHost",
    "KeyHost",
    "OmnibarHost",
    "OmnibarRequest",
    "SearchAlias",
    "SearchAliasHost",
    "SettingsHost",
]
