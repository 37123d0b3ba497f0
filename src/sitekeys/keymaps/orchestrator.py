"""Startup sequencing: unmaps, search engines, then normal and visual keys."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Sequence

from sitekeys.runtime import telemetry
from sitekeys.runtime.telemetry import span

from .categories import Category
from .compiler import CompileReport, KeyCompiler, RegistrationFailure
from .domains import GLOBAL_DOMAIN
from .models import (
    NORMAL,
    VISUAL,
    Invoke,
    Registration,
    SearchEngineSpec,
    UnbindDirectives,
)

if TYPE_CHECKING:
    from sitekeys.config import SiteConfig
    from sitekeys.host.protocols import ClipboardHost, Host, OmnibarHost

DomainMap = Mapping[str, Sequence[Any]]
AliasGroups = Mapping[str, Sequence[str]]

SEARCH_ENGINE_OMNIBAR = "SearchEngine"
CLIPBOARD_PREFIX = "c"


def hydrate_aliases(
    domain_map: DomainMap,
    alias_groups: Optional[AliasGroups] = None,
    *,
    logger_name: str | None = None,
) -> dict[str, Sequence[Any]]:
    """Copy each base domain's list under its alias hostnames.

    Explicit entries in ``domain_map`` win over alias expansions of the same
    hostname. Alias targets share the base's list object.
    """

    hydrated: dict[str, Sequence[Any]] = {}
    for base, targets in (alias_groups or {}).items():
        specs = domain_map.get(base)
        if specs is None:
            telemetry.record_event(
                "keymaps.alias_base_missing",
                level="debug",
                data={"base": base, "aliases": list(targets)},
                logger_name=logger_name,
            )
            continue
        for target in targets:
            hydrated[target] = specs
    hydrated.update(domain_map)
    return hydrated


def register_keys(
    compiler: KeyCompiler,
    domain_map: DomainMap,
    alias_groups: Optional[AliasGroups] = None,
    site_leader: str = "",
    mode: str = NORMAL,
) -> CompileReport:
    """Compile every domain's list in declared order into ``mode``."""

    pass_report = CompileReport()
    for domain, specs in hydrate_aliases(
        domain_map, alias_groups, logger_name=compiler.logger_name
    ).items():
        if isinstance(specs, (str, bytes, Mapping)) or not isinstance(
            specs, Iterable
        ):
            failure = compiler.record_failure(
                domain,
                "*",
                mode,
                TypeError(f"bindings for '{domain}' must be a list"),
                stage="domain",
            )
            pass_report.failures.append(failure)
            continue
        for spec in specs:
            registration = compiler.register_key(domain, spec, site_leader, mode)
            if registration is None:
                pass_report.failures.append(compiler.report.failures[-1])
            else:
                pass_report.registered.append(registration)
    return pass_report


def _open_search(omnibar: "OmnibarHost", alias: str) -> Callable[[], None]:
    def callback() -> None:
        omnibar.open_omnibar(SEARCH_ENGINE_OMNIBAR, extra=alias)

    return callback


def _open_search_with_clipboard(
    clipboard: "ClipboardHost", omnibar: "OmnibarHost", alias: str
) -> Callable[[], None]:
    def callback() -> None:
        clipboard.read(
            lambda text: omnibar.open_omnibar(
                SEARCH_ENGINE_OMNIBAR, extra=alias, pref=text
            )
        )

    return callback


def search_registrations(
    engine: SearchEngineSpec, search_leader: str, host: "Host"
) -> tuple[Registration, Registration]:
    """The two global normal-mode keys every search engine gets."""

    key = f"{search_leader}{engine.alias}"
    plain = Registration(
        mode=NORMAL,
        key=key,
        description=f"{Category.OMNIBAR.tag} Search {engine.name}",
        action=Invoke(_open_search(host, engine.alias)),
        category=Category.OMNIBAR,
        alias=engine.alias,
    )
    clipboard = Registration(
        mode=NORMAL,
        key=f"{CLIPBOARD_PREFIX}{key}",
        description=(
            f"{Category.OMNIBAR.tag} Search {engine.name} with clipboard contents"
        ),
        action=Invoke(_open_search_with_clipboard(host, host, engine.alias)),
        category=Category.OMNIBAR,
        alias=engine.alias,
    )
    return plain, clipboard


def register_search_engines(
    compiler: KeyCompiler,
    engines: Mapping[str, Any] | Iterable[Any],
    search_leader: str = "o",
) -> CompileReport:
    """Register each engine with the omnibar, then bind its derived keys."""

    host: "Host" = compiler.host  # type: ignore[assignment]
    entries = engines.values() if isinstance(engines, Mapping) else engines
    pass_report = CompileReport()
    for entry in entries:
        try:
            engine = SearchEngineSpec.coerce(entry)
            host.add_search_alias(
                engine.alias,
                engine.name,
                engine.search,
                "",
                engine.compl,
                engine.callback,
                None,
                favicon_url=engine.favicon,
                skip_maps=True,
            )
        except Exception as exc:
            alias = entry.get("alias") if isinstance(entry, Mapping) else None
            alias = getattr(entry, "alias", alias)
            pass_report.failures.append(
                compiler.record_failure(
                    GLOBAL_DOMAIN, str(alias), NORMAL, exc, stage="search_alias"
                )
            )
            continue
        for registration in search_registrations(engine, search_leader, host):
            if compiler.apply(registration) is None:
                pass_report.failures.append(compiler.report.failures[-1])
            else:
                pass_report.registered.append(registration)
    return pass_report


def apply_unmaps(compiler: KeyCompiler, directives: UnbindDirectives) -> int:
    """Remove factory defaults; returns how many directives removed something."""

    host: "Host" = compiler.host  # type: ignore[assignment]
    removed = 0
    steps: list[tuple[str, str, Callable[[], bool]]] = []
    for key in directives.mappings:
        steps.append((NORMAL, key, lambda key=key: host.unbind_key(NORMAL, key)))
    for key in directives.vmappings:
        steps.append((VISUAL, key, lambda key=key: host.unbind_key(VISUAL, key)))
    for leader, aliases in directives.search_aliases.items():
        for alias in aliases:
            steps.append(
                (
                    NORMAL,
                    f"{leader}{alias}",
                    lambda alias=alias, leader=leader: host.remove_search_alias(
                        alias, leader
                    ),
                )
            )

    for mode, key, step in steps:
        try:
            if step():
                removed += 1
        except Exception as exc:
            telemetry.record_event(
                "keymaps.unmap_failed",
                level="warning",
                data={"key": key, "mode": mode, "error": str(exc)},
                logger_name=compiler.logger_name,
            )
            compiler.report.failures.append(
                RegistrationFailure(
                    domain=GLOBAL_DOMAIN,
                    alias=key,
                    mode=mode,
                    error=str(exc),
                    stage="unmap",
                )
            )
    return removed


def bootstrap(
    config: "SiteConfig",
    host: "Host",
    *,
    logger_name: str | None = None,
) -> CompileReport:
    """Run the one-time startup pass and return everything that happened.

    Order: settings, unmaps, search engines, ``maps`` (normal), ``vmaps``
    (visual). Absent sections are skipped.
    """

    compiler = KeyCompiler(host, logger_name=logger_name)
    with span("bootstrap", logger_name=logger_name, component=True):
        if config.settings is not None:
            try:
                host.apply_settings(config.resolve_settings())
            except Exception as exc:
                compiler.record_failure(
                    GLOBAL_DOMAIN, "settings", NORMAL, exc, stage="settings"
                )
        if config.unmaps is not None:
            apply_unmaps(compiler, config.unmaps)
        if config.search_engines is not None:
            register_search_engines(
                compiler, config.search_engines, config.search_leader
            )
        if config.maps is not None:
            register_keys(
                compiler, config.maps, config.aliases, config.site_leader, NORMAL
            )
        if config.vmaps is not None:
            register_keys(
                compiler, config.vmaps, config.aliases, config.site_leader, VISUAL
            )

    telemetry.record_event(
        "bootstrap.complete",
        data={
            "registered": len(compiler.report.registered),
            "failures": len(compiler.report.failures),
        },
        logger_name=logger_name,
    )
    return compiler.report


__all__ = [
    "apply_unmaps",
    "bootstrap",
    "hydrate_aliases",
    "register_keys",
    "register_search_engines",
    "search_registrations",
]
