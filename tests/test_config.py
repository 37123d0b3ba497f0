from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from sitekeys.config import SiteConfig, load_config, load_config_object
from sitekeys.errors import ConfigurationShapeError


def make_raw() -> dict:
    return {
        "settings": {"smoothScroll": False},
        "unmaps": {
            "mappings": ["L"],
            "vmappings": ["h"],
            "searchAliases": {"s": ["g", "d"]},
        },
        "searchEngines": {
            "google": {"alias": "g", "name": "Google", "search": "https://g/?q="}
        },
        "keys": {
            "maps": {"global": [{"alias": "P", "map": "S"}]},
            "vmaps": {"global": [{"alias": "<ArrowLeft>", "map": "h"}]},
            "aliases": {"wikipedia.org": ["wiktionary.org"]},
        },
        "siteleader": "r",
        "searchleader": "o",
    }


def test_load_config_reads_every_section() -> None:
    config = load_config(make_raw())

    assert config.site_leader == "r"
    assert config.search_leader == "o"
    assert config.unmaps is not None
    assert config.unmaps.mappings == ("L",)
    assert dict(config.unmaps.search_aliases) == {"s": ("g", "d")}
    assert config.maps is not None and "global" in config.maps
    assert config.vmaps is not None and "global" in config.vmaps
    assert dict(config.aliases) == {"wikipedia.org": ("wiktionary.org",)}
    assert config.resolve_settings() == {"smoothScroll": False}


def test_absent_sections_stay_none() -> None:
    config = load_config({})

    assert config.maps is None
    assert config.vmaps is None
    assert config.unmaps is None
    assert config.search_engines is None
    assert config.settings is None
    assert config.search_leader == "o"
    assert config.site_leader == ""


def test_snake_case_keys_are_accepted() -> None:
    config = load_config({"site_leader": ",", "search_leader": "s"})

    assert config.site_leader == ","
    assert config.search_leader == "s"


def test_malformed_section_is_dropped_when_lenient() -> None:
    raw = make_raw()
    raw["keys"]["maps"] = ["not", "a", "mapping"]
    raw["unmaps"] = "L"

    config = load_config(raw)

    assert config.maps is None
    assert config.unmaps is None
    assert config.vmaps is not None


def test_malformed_section_raises_when_strict() -> None:
    raw = make_raw()
    raw["searchEngines"] = "google"

    with pytest.raises(ConfigurationShapeError):
        load_config(raw, strict=True)


def test_unknown_section_raises_when_strict() -> None:
    with pytest.raises(ConfigurationShapeError):
        load_config({"keyz": {}}, strict=True)
    assert load_config({"keyz": {}}).maps is None


def test_unmaps_nested_under_keys_are_read() -> None:
    raw = make_raw()
    raw["keys"]["unmaps"] = raw.pop("unmaps")

    config = load_config(raw, strict=True)

    assert config.unmaps is not None
    assert config.unmaps.mappings == ("L",)
    assert config.unmaps.vmappings == ("h",)


def test_top_level_unmaps_win_over_nested_ones() -> None:
    raw = make_raw()
    raw["keys"]["unmaps"] = {"mappings": ["j"]}

    config = load_config(raw)

    assert config.unmaps is not None
    assert config.unmaps.mappings == ("L",)


def test_unknown_keys_subsection_raises_when_strict() -> None:
    raw = make_raw()
    raw["keys"]["vmap"] = {"global": []}

    with pytest.raises(ConfigurationShapeError, match="keys.vmap"):
        load_config(raw, strict=True)

    config = load_config(raw)
    assert config.maps is not None
    assert config.vmaps is not None


def test_non_string_leader_raises_when_strict() -> None:
    with pytest.raises(ConfigurationShapeError):
        load_config({"siteleader": 3}, strict=True)
    assert load_config({"siteleader": 3}).site_leader == ""


def test_settings_must_resolve_to_mapping() -> None:
    config = SiteConfig(settings=lambda: ["nope"])  # type: ignore[arg-type,return-value]

    with pytest.raises(ConfigurationShapeError):
        config.resolve_settings()


def test_with_leaders_keeps_unspecified_values() -> None:
    config = SiteConfig(site_leader="r", search_leader="o")

    updated = config.with_leaders(site_leader=",")

    assert updated.site_leader == ","
    assert updated.search_leader == "o"
    assert config.site_leader == "r"


def test_load_config_object_imports_module(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    module = tmp_path / "my_site_keys.py"
    module.write_text(
        textwrap.dedent(
            """
            CONFIG = {"siteleader": ";", "keys": {"maps": {"global": []}}}

            def build():
                return {"siteleader": "x"}
            """
        )
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    assert load_config_object("my_site_keys").site_leader == ";"
    assert load_config_object("my_site_keys:build").site_leader == "x"
    with pytest.raises(ConfigurationShapeError):
        load_config_object("my_site_keys:missing")
