"""Loading the declarative site configuration into a ``SiteConfig``."""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from sitekeys.errors import ConfigurationShapeError
from sitekeys.keymaps.models import UnbindDirectives
from sitekeys.runtime import telemetry

ENV_PREFIX = "SITEKEYS_"
DEFAULT_SEARCH_LEADER = "o"

Settings = Union[Mapping[str, Any], Callable[[], Mapping[str, Any]]]

_TOP_LEVEL = frozenset(
    {"settings", "unmaps", "searchEngines", "keys", "siteleader", "searchleader"}
)
_KEYS_SECTIONS = frozenset({"maps", "vmaps", "aliases", "unmaps"})
_ALIASES = {
    "search_engines": "searchEngines",
    "site_leader": "siteleader",
    "search_leader": "searchleader",
}


def env_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read ``SITEKEYS_<name>`` from the environment."""

    return os.getenv(f"{ENV_PREFIX}{name}", default)


@dataclass(frozen=True)
class SiteConfig:
    """Everything one startup pass consumes. ``None`` marks an absent section."""

    maps: Optional[Mapping[str, Sequence[Any]]] = None
    vmaps: Optional[Mapping[str, Sequence[Any]]] = None
    aliases: Mapping[str, Sequence[str]] = field(default_factory=dict)
    unmaps: Optional[UnbindDirectives] = None
    search_engines: Optional[Mapping[str, Any] | Sequence[Any]] = None
    settings: Optional[Settings] = None
    site_leader: str = ""
    search_leader: str = DEFAULT_SEARCH_LEADER

    def resolve_settings(self) -> Mapping[str, Any]:
        if self.settings is None:
            return MappingProxyType({})
        value = self.settings() if callable(self.settings) else self.settings
        if not isinstance(value, Mapping):
            raise ConfigurationShapeError("settings must resolve to a mapping")
        return value

    def with_leaders(
        self,
        *,
        site_leader: Optional[str] = None,
        search_leader: Optional[str] = None,
    ) -> "SiteConfig":
        return replace(
            self,
            site_leader=self.site_leader if site_leader is None else site_leader,
            search_leader=(
                self.search_leader if search_leader is None else search_leader
            ),
        )


def _check_domain_map(value: Any, section: str) -> Mapping[str, Sequence[Any]]:
    if not isinstance(value, Mapping):
        raise ConfigurationShapeError(f"'{section}' must map domains to binding lists")
    for domain in value:
        if not isinstance(domain, str) or not domain:
            raise ConfigurationShapeError(
                f"'{section}' keys must be domain names, got {domain!r}"
            )
    return value


def _check_aliases(value: Any) -> Mapping[str, Sequence[str]]:
    if not isinstance(value, Mapping):
        raise ConfigurationShapeError("'keys.aliases' must map domains to alias lists")
    checked: dict[str, tuple[str, ...]] = {}
    for base, targets in value.items():
        if isinstance(targets, str) or not isinstance(targets, Sequence):
            raise ConfigurationShapeError(
                f"aliases of '{base}' must be a list of hostnames"
            )
        checked[base] = tuple(str(target) for target in targets)
    return checked


def _check_leader(value: Any, section: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationShapeError(f"'{section}' must be a string")
    return value


class _SectionLoader:
    def __init__(self, *, strict: bool, logger_name: Optional[str]) -> None:
        self.strict = strict
        self.logger_name = logger_name

    def load(self, section: str, loader: Callable[[], Any]) -> Any:
        try:
            return loader()
        except (ConfigurationShapeError, TypeError, ValueError) as exc:
            if self.strict:
                if isinstance(exc, ConfigurationShapeError):
                    raise
                raise ConfigurationShapeError(f"'{section}': {exc}") from exc
            telemetry.record_event(
                "config.section_dropped",
                level="warning",
                data={"section": section, "error": str(exc)},
                logger_name=self.logger_name,
            )
            return None


def load_config(
    data: Mapping[str, Any],
    *,
    strict: bool = False,
    logger_name: Optional[str] = None,
) -> SiteConfig:
    """Build a ``SiteConfig`` from the declarative structure.

    Each top-level section is optional. A malformed section is dropped with a
    warning, or raises ``ConfigurationShapeError`` when ``strict`` is set.
    """

    if not isinstance(data, Mapping):
        raise ConfigurationShapeError("configuration must be a mapping")

    raw = {_ALIASES.get(key, key): value for key, value in data.items()}
    sections = _SectionLoader(strict=strict, logger_name=logger_name)

    for unknown in sorted(set(raw) - _TOP_LEVEL):
        sections.load(
            unknown,
            lambda unknown=unknown: _raise(f"unknown section '{unknown}'"),
        )

    settings = None
    if "settings" in raw:
        settings = sections.load("settings", lambda: _check_settings(raw["settings"]))

    unmaps = None
    if "unmaps" in raw:
        unmaps = sections.load("unmaps", lambda: _load_unmaps(raw["unmaps"]))

    engines = None
    if "searchEngines" in raw:
        engines = sections.load(
            "searchEngines", lambda: _check_engines(raw["searchEngines"])
        )

    maps = vmaps = None
    aliases: Mapping[str, Sequence[str]] = {}
    keys = raw.get("keys")
    if keys is not None:
        if not isinstance(keys, Mapping):
            sections.load("keys", lambda: _raise("'keys' must be a mapping"))
            keys = {}
        if "maps" in keys:
            maps = sections.load(
                "keys.maps", lambda: _check_domain_map(keys["maps"], "keys.maps")
            )
        if "vmaps" in keys:
            vmaps = sections.load(
                "keys.vmaps", lambda: _check_domain_map(keys["vmaps"], "keys.vmaps")
            )
        if "aliases" in keys:
            aliases = (
                sections.load("keys.aliases", lambda: _check_aliases(keys["aliases"]))
                or {}
            )
        # top-level ``unmaps`` wins when both are given
        if "unmaps" in keys and "unmaps" not in raw:
            unmaps = sections.load("keys.unmaps", lambda: _load_unmaps(keys["unmaps"]))
        for unknown in sorted(set(keys) - _KEYS_SECTIONS, key=str):
            sections.load(
                f"keys.{unknown}",
                lambda unknown=unknown: _raise(f"unknown section 'keys.{unknown}'"),
            )

    site_leader = ""
    if raw.get("siteleader") is not None:
        site_leader = (
            sections.load(
                "siteleader", lambda: _check_leader(raw["siteleader"], "siteleader")
            )
            or ""
        )
    search_leader = DEFAULT_SEARCH_LEADER
    if raw.get("searchleader") is not None:
        search_leader = (
            sections.load(
                "searchleader",
                lambda: _check_leader(raw["searchleader"], "searchleader"),
            )
            or DEFAULT_SEARCH_LEADER
        )

    return SiteConfig(
        maps=maps,
        vmaps=vmaps,
        aliases=aliases,
        unmaps=unmaps,
        search_engines=engines,
        settings=settings,
        site_leader=site_leader,
        search_leader=search_leader,
    )


def _raise(message: str) -> Any:
    raise ConfigurationShapeError(message)


def _check_settings(value: Any) -> Settings:
    if not (isinstance(value, Mapping) or callable(value)):
        raise ConfigurationShapeError("'settings' must be a mapping or a callable")
    return value


def _load_unmaps(value: Any) -> UnbindDirectives:
    if not isinstance(value, Mapping):
        raise ConfigurationShapeError("'unmaps' must be a mapping")
    return UnbindDirectives.from_mapping(value)


def _check_engines(value: Any) -> Mapping[str, Any] | Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (Mapping, Sequence)):
        raise ConfigurationShapeError("'searchEngines' must be a mapping or a list")
    return value


def load_config_object(
    target: str,
    *,
    strict: bool = False,
    logger_name: Optional[str] = None,
) -> SiteConfig:
    """Import ``"package.module:attribute"`` and load it as a ``SiteConfig``.

    The attribute defaults to ``CONFIG`` and may be a ``SiteConfig``, a mapping,
    or a zero-argument callable returning either.
    """

    module_name, _, attribute = target.partition(":")
    if not module_name:
        raise ConfigurationShapeError(f"Invalid config target '{target}'")
    module = importlib.import_module(module_name)
    try:
        value = getattr(module, attribute or "CONFIG")
    except AttributeError as exc:
        raise ConfigurationShapeError(
            f"Module '{module_name}' has no attribute '{attribute or 'CONFIG'}'"
        ) from exc

    if callable(value) and not isinstance(value, SiteConfig):
        value = value()
    if isinstance(value, SiteConfig):
        return value
    return load_config(value, strict=strict, logger_name=logger_name)


__all__ = [
    "DEFAULT_SEARCH_LEADER",
    "SiteConfig",
    "env_setting",
    "load_config",
    "load_config_object",
]
