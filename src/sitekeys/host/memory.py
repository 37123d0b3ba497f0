"""In-memory host engine used by the CLI and the test-suite."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional

from sitekeys.errors import RegistrationError
from sitekeys.keymaps.domains import DomainPredicate
from sitekeys.keymaps.models import MODES, BindingAction, Invoke, Remap, ensure_mode
from sitekeys.runtime.telemetry import span


@dataclass(frozen=True, slots=True)
class HostBinding:
    """One entry in a mode registry."""

    mode: str
    key: str
    description: str
    action: Invoke
    predicate: Optional[DomainPredicate] = None
    revision: int = 0
    remap_of: Optional[str] = None
    factory: bool = False

    def applies_to(self, url: Optional[str]) -> bool:
        if self.predicate is None:
            return True
        return url is not None and self.predicate.matches(url)


@dataclass(frozen=True, slots=True)
class SearchAlias:
    alias: str
    name: str
    search: Any
    completion: Any = ""
    callback: Optional[Callable[..., object]] = None
    favicon_url: Optional[str] = None
    skip_maps: bool = False


@dataclass(frozen=True, slots=True)
class OmnibarRequest:
    type: str
    extra: Optional[str] = None
    pref: Optional[str] = None


@dataclass(slots=True)
class HostStats:
    """Snapshot describing registry state."""

    binding_count: int
    search_alias_count: int
    modes: tuple[str, ...]


class InMemoryHost:
    """Mode-separated key registries with last-write-wins per scope.

    Remaps copy the action the target resolves to at bind time, so a later
    rebinding of the target does not leak into earlier remaps.
    """

    def __init__(
        self,
        *,
        defaults: Optional[Mapping[str, Mapping[str, str]]] = None,
        default_search_aliases: Optional[Mapping[str, Iterable[str]]] = None,
        clipboard_text: str = "",
        logger_name: str | None = None,
    ) -> None:
        self._registries: Dict[str, Dict[str, list[HostBinding]]] = {
            mode: {} for mode in MODES
        }
        self._search_aliases: Dict[str, SearchAlias] = {}
        self._revision = 0
        self._logger_name = logger_name
        self.settings: Dict[str, Any] = {}
        self.clipboard_text = clipboard_text
        self.omnibar_requests: list[OmnibarRequest] = []
        self.invocations: list[tuple[str, str]] = []

        for mode, keys in (defaults or {}).items():
            for key, description in keys.items():
                self.seed_default(mode, key, description)
        for leader, aliases in (default_search_aliases or {}).items():
            for alias in aliases:
                self._search_aliases[alias] = SearchAlias(alias, alias, "")
                self.seed_default("n", f"{leader}{alias}", f"Search {alias}")

    def revision(self) -> int:
        return self._revision

    def seed_default(self, mode: str, key: str, description: str = "") -> HostBinding:
        """Install a factory binding whose callback records its own invocation."""

        action = Invoke(partial(self._record_invocation, ensure_mode(mode), key))
        binding = HostBinding(
            mode=mode,
            key=key,
            description=description,
            action=action,
            revision=self._touch(),
            factory=True,
        )
        self._registries[mode].setdefault(key, []).append(binding)
        return binding

    def bind_key(
        self,
        mode: str,
        key: str,
        description: str,
        action: BindingAction,
        *,
        domain: Optional[DomainPredicate] = None,
    ) -> None:
        with span(
            "host::bind_key",
            logger_name=self._logger_name,
            component="host",
            metadata={"mode": mode, "key": key},
        ):
            if mode not in self._registries:
                raise RegistrationError(key, mode, "unknown mode")
            if not key:
                raise RegistrationError(key, mode, "empty key")

            remap_of: Optional[str] = None
            if isinstance(action, Remap):
                target = self._lookup_for_scope(mode, action.target, domain)
                if target is None:
                    raise RegistrationError(
                        key, mode, f"no mapping for '{action.target}'"
                    )
                resolved = target.action
                remap_of = action.target
            elif isinstance(action, Invoke):
                resolved = action
            else:
                raise RegistrationError(key, mode, f"unsupported action {action!r}")

            bucket = self._registries[mode].setdefault(key, [])
            bucket[:] = [entry for entry in bucket if entry.predicate != domain]
            bucket.append(
                HostBinding(
                    mode=mode,
                    key=key,
                    description=description,
                    action=resolved,
                    predicate=domain,
                    revision=self._touch(),
                    remap_of=remap_of,
                )
            )

    def unbind_key(self, mode: str, key: str) -> bool:
        removed = self._registries.get(mode, {}).pop(key, None)
        if removed:
            self._touch()
        return bool(removed)

    def resolve(
        self, mode: str, key: str, url: Optional[str] = None
    ) -> Optional[HostBinding]:
        """Most recent binding for ``key`` that applies to ``url``.

        Without a ``url`` only global bindings are considered.
        """

        for entry in reversed(self._registries.get(mode, {}).get(key, [])):
            if entry.applies_to(url):
                return entry
        return None

    def trigger(self, mode: str, key: str, url: Optional[str] = None) -> object:
        binding = self.resolve(mode, key, url)
        if binding is None:
            raise KeyError(f"No binding for '{key}' in mode '{mode}' at {url!r}")
        return binding.action()

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[HostBinding]:
        modes = MODES if mode is None else (mode,)
        for name in modes:
            for bucket in self._registries.get(name, {}).values():
                yield from bucket

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
    ) -> None:
        del empty_modifier, reserved
        if not alias:
            raise RegistrationError(alias, "n", "search alias cannot be empty")
        self._search_aliases[alias] = SearchAlias(
            alias=alias,
            name=name,
            search=search,
            completion=completion,
            callback=callback,
            favicon_url=favicon_url,
            skip_maps=skip_maps,
        )
        self._touch()

    def remove_search_alias(self, alias: str, leader: str) -> bool:
        removed = self._search_aliases.pop(alias, None) is not None
        removed = self.unbind_key("n", f"{leader}{alias}") or removed
        if removed:
            self._touch()
        return removed

    def search_alias(self, alias: str) -> Optional[SearchAlias]:
        return self._search_aliases.get(alias)

    def open_omnibar(
        self,
        type: str,
        *,
        extra: Optional[str] = None,
        pref: Optional[str] = None,
    ) -> None:
        self.omnibar_requests.append(OmnibarRequest(type=type, extra=extra, pref=pref))

    def read(self, on_text: Callable[[str], None]) -> None:
        on_text(self.clipboard_text)

    def apply_settings(self, settings: Mapping[str, Any]) -> None:
        self.settings.update(settings)

    def stats(self) -> HostStats:
        return HostStats(
            binding_count=sum(1 for _ in self.iter_bindings()),
            search_alias_count=len(self._search_aliases),
            modes=tuple(mode for mode in MODES if self._registries[mode]),
        )

    def _lookup_for_scope(
        self, mode: str, key: str, domain: Optional[DomainPredicate]
    ) -> Optional[HostBinding]:
        for entry in reversed(self._registries[mode].get(key, [])):
            if entry.predicate is None or entry.predicate == domain:
                return entry
        return None

    def _record_invocation(self, mode: str, key: str) -> None:
        self.invocations.append((mode, key))

    def _touch(self) -> int:
        self._revision += 1
        return self._revision


__all__ = [
    "HostBinding",
    "HostStats",
    "InMemoryHost",
    "OmnibarRequest",
    "SearchAlias",
]
