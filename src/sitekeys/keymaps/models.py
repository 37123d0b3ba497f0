"""Dataclasses describing declared bindings, search engines and unmaps."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Literal, Mapping, Optional, Union

from sitekeys.errors import ConfigurationShapeError

from .categories import Category, lookup_category
from .domains import DEFAULT_PATH, GLOBAL_DOMAIN, DomainPredicate

Mode = Literal["n", "v"]
NORMAL: Mode = "n"
VISUAL: Mode = "v"
MODES: tuple[Mode, ...] = (NORMAL, VISUAL)


def ensure_mode(mode: str) -> Mode:
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}'; expected one of {MODES}")
    return mode  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class Remap:
    """Behave as if ``target`` had been typed."""

    target: str

    def __post_init__(self) -> None:
        if not isinstance(self.target, str) or not self.target:
            raise ValueError("Remap target must be a non-empty string")


@dataclass(frozen=True, slots=True)
class Invoke:
    """Run ``callback`` when the key is triggered."""

    callback: Callable[[], object]

    def __post_init__(self) -> None:
        if not callable(self.callback):
            raise TypeError("Invoke callback must be callable")

    def __call__(self) -> object:
        return self.callback()


BindingAction = Union[Remap, Invoke]

_SPEC_KEYS = frozenset(
    {"alias", "map", "callback", "leader", "category", "description", "path", "hide"}
)


@dataclass(frozen=True, slots=True)
class BindingSpec:
    """One declared rule inside a domain's ordered list."""

    alias: str
    action: BindingAction
    leader: Optional[str] = None
    category: Category = Category.MISC
    description: str = ""
    path: str = DEFAULT_PATH
    hide: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.alias, str):
            raise TypeError(f"alias must be a string, got {type(self.alias).__name__}")
        if not self.alias:
            raise ValueError("alias cannot be empty")
        if not isinstance(self.action, (Remap, Invoke)):
            raise TypeError("action must be a Remap or an Invoke")
        if self.leader is not None and not isinstance(self.leader, str):
            raise TypeError("leader must be a string when given")
        if not isinstance(self.path, str):
            raise TypeError("path must be a string")
        object.__setattr__(self, "category", lookup_category(self.category))
        object.__setattr__(self, "description", str(self.description or ""))
        object.__setattr__(self, "hide", bool(self.hide))

    @property
    def is_remap(self) -> bool:
        return isinstance(self.action, Remap)

    def resolve_leader(self, domain: str, site_leader: str) -> str:
        if self.leader is not None:
            return self.leader
        return "" if domain == GLOBAL_DOMAIN else site_leader

    def final_key(self, domain: str, site_leader: str) -> str:
        return f"{self.resolve_leader(domain, site_leader)}{self.alias}"

    def predicate(self, domain: str) -> Optional[DomainPredicate]:
        if domain == GLOBAL_DOMAIN:
            return None
        return DomainPredicate(domain, self.path)

    @property
    def display_description(self) -> str:
        return f"{self.category.tag} {self.description}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BindingSpec":
        """Build a spec from a declaration dict; ``map`` wins over ``callback``."""

        unknown = set(data) - _SPEC_KEYS
        if unknown:
            raise ConfigurationShapeError(
                f"Unknown binding fields {sorted(unknown)} for alias {data.get('alias')!r}"
            )
        action: BindingAction
        if data.get("map") is not None:
            action = Remap(data["map"])
        elif data.get("callback") is not None:
            action = Invoke(data["callback"])
        else:
            raise ConfigurationShapeError(
                f"Binding {data.get('alias')!r} needs either 'map' or 'callback'"
            )
        path = data.get("path")
        return cls(
            alias=data.get("alias"),  # type: ignore[arg-type]
            action=action,
            leader=data.get("leader"),
            category=data.get("category") or Category.MISC,
            description=data.get("description") or "",
            path=DEFAULT_PATH if path is None else path,
            hide=bool(data.get("hide", False)),
        )

    @classmethod
    def coerce(cls, entry: "BindingSpec | Mapping[str, Any]") -> "BindingSpec":
        if isinstance(entry, BindingSpec):
            return entry
        if isinstance(entry, Mapping):
            return cls.from_mapping(entry)
        raise ConfigurationShapeError(
            f"Binding declarations must be mappings, got {type(entry).__name__}"
        )


@dataclass(frozen=True, slots=True)
class SearchEngineSpec:
    """Search engine registered with the omnibar plus its two derived keys."""

    alias: str
    name: str
    search: str | Callable[..., object]
    compl: str | Callable[..., object] = ""
    callback: Optional[Callable[..., object]] = None
    favicon: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.alias, str) or not self.alias:
            raise ValueError("search engine alias cannot be empty")
        if not self.name:
            raise ValueError(f"search engine '{self.alias}' needs a name")
        if not self.search:
            raise ValueError(f"search engine '{self.alias}' needs a search template")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SearchEngineSpec":
        return cls(
            alias=data.get("alias"),  # type: ignore[arg-type]
            name=data.get("name"),  # type: ignore[arg-type]
            search=data.get("search"),  # type: ignore[arg-type]
            compl=data.get("compl") or "",
            callback=data.get("callback"),
            favicon=data.get("favicon"),
        )

    @classmethod
    def coerce(
        cls, entry: "SearchEngineSpec | Mapping[str, Any]"
    ) -> "SearchEngineSpec":
        if isinstance(entry, SearchEngineSpec):
            return entry
        if isinstance(entry, Mapping):
            return cls.from_mapping(entry)
        raise ConfigurationShapeError(
            f"Search engines must be mappings, got {type(entry).__name__}"
        )


def _string_tuple(values: Iterable[Any], section: str) -> tuple[str, ...]:
    if isinstance(values, str):
        raise ConfigurationShapeError(f"'{section}' must be a list of keys")
    result = tuple(values)
    for value in result:
        if not isinstance(value, str) or not value:
            raise ConfigurationShapeError(
                f"'{section}' entries must be non-empty strings, got {value!r}"
            )
    return result


@dataclass(frozen=True, slots=True)
class UnbindDirectives:
    """Factory defaults to remove before anything new is bound."""

    mappings: tuple[str, ...] = ()
    vmappings: tuple[str, ...] = ()
    search_aliases: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mappings", _string_tuple(self.mappings, "mappings"))
        object.__setattr__(
            self, "vmappings", _string_tuple(self.vmappings, "vmappings")
        )
        aliases = {
            str(leader): _string_tuple(items, f"searchAliases.{leader}")
            for leader, items in dict(self.search_aliases).items()
        }
        object.__setattr__(self, "search_aliases", MappingProxyType(aliases))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "UnbindDirectives":
        search_aliases = data.get("searchAliases", data.get("search_aliases")) or {}
        if not isinstance(search_aliases, Mapping):
            raise ConfigurationShapeError("'searchAliases' must map leaders to aliases")
        return cls(
            mappings=data.get("mappings") or (),
            vmappings=data.get("vmappings") or (),
            search_aliases=search_aliases,
        )


@dataclass(frozen=True, slots=True)
class Registration:
    """Fully resolved binding, as submitted to the host."""

    mode: Mode
    key: str
    description: str
    action: BindingAction
    domain: str = GLOBAL_DOMAIN
    predicate: Optional[DomainPredicate] = None
    category: Category = Category.MISC
    alias: str = ""
    hide: bool = False


__all__ = [
    "Mode",
    "NORMAL",
    "VISUAL",
    "MODES",
    "ensure_mode",
    "Remap",
    "Invoke",
    "BindingAction",
    "BindingSpec",
    "SearchEngineSpec",
    "UnbindDirectives",
    "Registration",
]
