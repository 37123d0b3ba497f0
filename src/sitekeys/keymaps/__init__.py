"""Binding declarations, the compiler, and startup orchestration."""

from .categories import Category, lookup_category
from .domains import DEFAULT_PATH, GLOBAL_DOMAIN, DomainPredicate, domain_regex
from .models import (
    MODES,
    NORMAL,
    VISUAL,
    BindingAction,
    BindingSpec,
    Invoke,
    Registration,
    Remap,
    SearchEngineSpec,
    UnbindDirectives,
)
from .compiler import CompileReport, KeyCompiler, RegistrationFailure
from .orchestrator import (
    apply_unmaps,
    bootstrap,
    hydrate_aliases,
    register_keys,
    register_search_engines,
)

__all__ = [
    "Category",
    "lookup_category",
    "DEFAULT_PATH",
    "GLOBAL_DOMAIN",
    "DomainPredicate",
    "domain_regex",
    "MODES",
    "NORMAL",
    "VISUAL",
    "BindingAction",
    "BindingSpec",
    "Invoke",
    "Registration",
    "Remap",
    "SearchEngineSpec",
    "UnbindDirectives",
    "CompileReport",
    "KeyCompiler",
    "RegistrationFailure",
    "apply_unmaps",
    "bootstrap",
    "hydrate_aliases",
    "register_keys",
    "register_search_engines",
]
