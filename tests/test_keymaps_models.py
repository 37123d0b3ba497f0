import pytest

from sitekeys.errors import ConfigurationShapeError, UnknownCategoryError
from sitekeys.keymaps import (
    BindingSpec,
    Category,
    Invoke,
    Remap,
    UnbindDirectives,
    lookup_category,
)
from sitekeys.keymaps.models import SearchEngineSpec, ensure_mode


def noop() -> None:
    return None


def test_map_takes_precedence_over_callback() -> None:
    spec = BindingSpec.from_mapping({"alias": "N", "map": "R", "callback": noop})

    assert spec.action == Remap("R")
    assert spec.is_remap


def test_callback_becomes_invoke() -> None:
    spec = BindingSpec.from_mapping({"alias": "a", "callback": noop})

    assert isinstance(spec.action, Invoke)
    assert spec.category is Category.MISC
    assert spec.description == ""
    assert spec.path == "(/.*)?"
    assert spec.hide is False


def test_spec_without_action_is_rejected() -> None:
    with pytest.raises(ConfigurationShapeError):
        BindingSpec.from_mapping({"alias": "a", "description": "nothing"})


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(ConfigurationShapeError):
        BindingSpec.from_mapping({"alias": "a", "callback": noop, "catgory": "tabs"})


def test_alias_must_be_a_non_empty_string() -> None:
    with pytest.raises(TypeError):
        BindingSpec(alias=None, action=Remap("j"))  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        BindingSpec(alias="", action=Remap("j"))


def test_leader_resolution() -> None:
    spec = BindingSpec("a", Remap("j"))
    override = BindingSpec("a", Remap("j"), leader=",")

    assert spec.final_key("global", "r") == "a"
    assert spec.final_key("github.com", "r") == "ra"
    assert override.final_key("global", "r") == ",a"
    assert override.final_key("github.com", "r") == ",a"


def test_hide_is_carried_as_metadata() -> None:
    spec = BindingSpec.from_mapping(
        {"alias": "O", "callback": noop, "description": "Open DOI", "hide": True}
    )

    assert spec.hide is True
    assert spec.display_description == "#misc Open DOI"


def test_category_lookup_by_value_and_member_name() -> None:
    assert lookup_category("mouseClick") is Category.MOUSE_CLICK
    assert lookup_category("MOUSE_CLICK") is Category.MOUSE_CLICK
    assert lookup_category(Category.TABS) is Category.TABS
    assert lookup_category(None) is Category.MISC
    assert Category.OMNIBAR.tag == "#omnibar"


def test_unknown_category_is_a_configuration_error() -> None:
    with pytest.raises(UnknownCategoryError):
        lookup_category("bogus")
    with pytest.raises(ConfigurationShapeError):
        BindingSpec("a", Remap("j"), category="bogus")  # type: ignore[arg-type]


def test_unbind_directives_from_mapping() -> None:
    directives = UnbindDirectives.from_mapping(
        {"mappings": ["L", ":"], "vmappings": ["h"], "searchAliases": {"s": ["g"]}}
    )

    assert directives.mappings == ("L", ":")
    assert directives.vmappings == ("h",)
    assert dict(directives.search_aliases) == {"s": ("g",)}


def test_unbind_directives_reject_bare_string() -> None:
    with pytest.raises(ConfigurationShapeError):
        UnbindDirectives.from_mapping({"mappings": "L"})


def test_search_engine_requires_alias_and_name() -> None:
    with pytest.raises(ValueError):
        SearchEngineSpec.from_mapping({"alias": "g", "search": "https://g/?q="})

    engine = SearchEngineSpec.from_mapping(
        {"alias": "g", "name": "Google", "search": "https://g/?q="}
    )
    assert engine.compl == ""
    assert engine.callback is None


def test_modes_are_validated() -> None:
    assert ensure_mode("v") == "v"
    with pytest.raises(ValueError):
        ensure_mode("x")
