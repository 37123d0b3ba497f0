"""Contracts the compiler expects from the host key-dispatch engine."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from sitekeys.keymaps.domains import DomainPredicate
from sitekeys.keymaps.models import BindingAction


class KeyHost(Protocol):
    """Per-mode key registries; ``"n"`` and ``"v"`` never share bindings."""

    def bind_key(
        self,
        mode: str,
        key: str,
        description: str,
        action: BindingAction,
        *,
        domain: Optional[DomainPredicate] = None,
    ) -> None: ...

    def unbind_key(self, mode: str, key: str) -> bool: ...


class SearchAliasHost(Protocol):
    def add_search_alias(
        self,
        alias: str,
        name: str,
        search: Any,
        empty_modifier: str,
        completion: Any,
        callback: Optional[Callable[..., object]] = None,
        reserved: Any = None,
        *,
        favicon_url: Optional[str] = None,
        skip_maps: bool = False,
    ) -> None: ...

    def remove_search_alias(self, alias: str, leader: str) -> bool: ...


class OmnibarHost(Protocol):
    def open_omnibar(
        self,
        type: str,
        *,
        extra: Optional[str] = None,
        pref: Optional[str] = None,
    ) -> None: ...


class ClipboardHost(Protocol):
    def read(self, on_text: Callable[[str], None]) -> None: ...


class SettingsHost(Protocol):
    def apply_settings(self, settings: Mapping[str, Any]) -> None: ...


class Host(
    KeyHost, SearchAliasHost, OmnibarHost, ClipboardHost, SettingsHost, Protocol
):
    """Everything ``bootstrap`` talks to."""


__all__ = [
    "KeyHost",
    "SearchAliasHost",
    "OmnibarHost",
    "ClipboardHost",
    "SettingsHost",
    "Host",
]
