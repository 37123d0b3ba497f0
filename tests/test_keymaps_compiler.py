from __future__ import annotations

from typing import Any, Callable

from sitekeys.host import InMemoryHost
from sitekeys.keymaps import (
    BindingSpec,
    Category,
    CompileReport,
    Invoke,
    KeyCompiler,
    Remap,
    register_keys,
)


def make_host() -> InMemoryHost:
    return InMemoryHost(
        defaults={
            "n": {"j": "Scroll down", "f": "Open a link"},
            "v": {"l": "forward character"},
        }
    )


def make_recorder(calls: list[str], name: str) -> Callable[[], None]:
    return lambda: calls.append(name)


def make_spec(alias: Any, callback: Callable[[], object], **extra: Any) -> dict:
    return {"alias": alias, "callback": callback, **extra}


def test_site_binding_gets_leader_predicate_and_misc_description() -> None:
    host = make_host()
    compiler = KeyCompiler(host)
    calls: list[str] = []

    register_keys(
        compiler,
        {"github.com": [make_spec("a", make_recorder(calls, "f"))]},
        site_leader="r",
        mode="n",
    )

    assert len(compiler.report.registered) == 1
    registration = compiler.report.registered[0]
    assert registration.key == "ra"
    assert registration.mode == "n"
    assert registration.description == "#misc "
    assert registration.predicate is not None
    assert registration.predicate.matches("https://gist.github.com/user")

    host.trigger("n", "ra", "https://github.com/org/repo")
    assert calls == ["f"]
    assert host.resolve("n", "ra") is None
    assert host.resolve("n", "ra", "https://gitlab.com/org") is None


def test_global_binding_has_no_leader_and_no_predicate() -> None:
    compiler = KeyCompiler(make_host())

    registration = compiler.register_key(
        "global", make_spec("P", lambda: None), site_leader="r"
    )

    assert registration is not None
    assert registration.key == "P"
    assert registration.predicate is None


def test_explicit_leader_overrides_defaults() -> None:
    compiler = KeyCompiler(make_host())

    site = compiler.register_key(
        "github.com", make_spec("a", lambda: None, leader=""), site_leader="r"
    )
    glob = compiler.register_key(
        "global", make_spec("a", lambda: None, leader=";"), site_leader="r"
    )

    assert site is not None and site.key == "a"
    assert glob is not None and glob.key == ";a"


def test_later_declaration_overrides_earlier_one() -> None:
    host = make_host()
    compiler = KeyCompiler(host)
    calls: list[str] = []

    register_keys(
        compiler,
        {
            "github.com": [
                make_spec("x", make_recorder(calls, "first")),
                make_spec("y", make_recorder(calls, "other")),
                make_spec("x", make_recorder(calls, "second")),
            ]
        },
        site_leader="r",
    )

    host.trigger("n", "rx", "https://github.com")
    assert calls == ["second"]
    assert len([b for b in host.iter_bindings("n") if b.key == "rx"]) == 1


def test_remap_replays_target_bound_at_that_time() -> None:
    host = make_host()
    compiler = KeyCompiler(host)

    compiler.register_key("global", {"alias": "J", "map": "j"})
    compiler.register_key("global", make_spec("j", lambda: None))

    host.trigger("n", "J")
    assert host.invocations == [("n", "j")]
    assert host.resolve("n", "J").remap_of == "j"


def test_remap_is_scoped_by_domain() -> None:
    host = make_host()
    compiler = KeyCompiler(host)

    compiler.register_key("github.com", {"alias": "s", "map": "f"}, site_leader="")

    assert host.resolve("n", "s") is None
    host.trigger("n", "s", "https://github.com/x")
    assert host.invocations == [("n", "f")]


def test_remap_to_unknown_target_is_recorded_not_raised() -> None:
    compiler = KeyCompiler(make_host())

    result = compiler.register_key("global", {"alias": "Z", "map": "missing"})

    assert result is None
    failure = compiler.report.failures[0]
    assert failure.alias == "Z"
    assert failure.mode == "n"
    assert "missing" in failure.error


def test_visual_and_normal_registries_are_separate() -> None:
    host = make_host()
    compiler = KeyCompiler(host)

    compiler.register_key("global", {"alias": "<ArrowRight>", "map": "l"}, mode="v")
    compiler.register_key("global", make_spec("q", lambda: None), mode="n")

    assert host.resolve("v", "<ArrowRight>") is not None
    assert host.resolve("n", "<ArrowRight>") is None
    assert host.resolve("v", "q") is None


def test_malformed_spec_does_not_block_the_rest() -> None:
    host = make_host()
    compiler = KeyCompiler(host)
    calls: list[str] = []

    report = register_keys(
        compiler,
        {
            "github.com": [
                make_spec("a", make_recorder(calls, "a")),
                make_spec(None, make_recorder(calls, "broken")),
                make_spec("c", make_recorder(calls, "c")),
            ]
        },
        site_leader="r",
    )

    assert [entry.key for entry in report.registered] == ["ra", "rc"]
    assert len(report.failures) == 1
    assert report.failures[0].alias == "None"
    assert report.failures[0].mode == "n"
    assert report.failures[0].domain == "github.com"


def test_invalid_path_regex_is_isolated() -> None:
    compiler = KeyCompiler(make_host())

    report = register_keys(
        compiler,
        {
            "example.com": [
                make_spec("a", lambda: None, path="(unclosed"),
                make_spec("b", lambda: None),
            ]
        },
        site_leader="r",
    )

    assert [entry.key for entry in report.registered] == ["rb"]
    assert report.failures[0].alias == "a"


def test_unknown_category_fails_only_that_binding() -> None:
    compiler = KeyCompiler(make_host())

    report = register_keys(
        compiler,
        {
            "global": [
                make_spec("a", lambda: None, category="nonsense"),
                make_spec("b", lambda: None, category="scroll"),
            ]
        },
    )

    assert [entry.key for entry in report.registered] == ["b"]
    assert report.registered[0].description == "#scroll "
    assert "nonsense" in report.failures[0].error


def test_non_list_domain_entry_is_reported() -> None:
    compiler = KeyCompiler(make_host())

    report = register_keys(
        compiler,
        {"bad.com": "oops", "global": [make_spec("a", lambda: None)]},
    )

    assert [entry.key for entry in report.registered] == ["a"]
    assert report.failures[0].domain == "bad.com"
    assert report.failures[0].stage == "domain"


def test_compile_key_does_not_touch_host() -> None:
    host = make_host()
    before = host.revision()

    registration = KeyCompiler.compile_key(
        "global",
        BindingSpec(
            alias="y",
            action=Invoke(lambda: None),
            category=Category.CLIPBOARD,
            description="Copy URL",
        ),
    )

    assert registration.description == "#clipboard Copy URL"
    assert host.revision() == before


def test_shared_report_accumulates_across_compilers() -> None:
    report = CompileReport()
    host = make_host()

    KeyCompiler(host, report=report).register_key(
        "global", BindingSpec("a", Remap("j"))
    )
    KeyCompiler(host, report=report).register_key(
        "global", BindingSpec("b", Remap("nope"))
    )

    assert len(report.registered) == 1
    assert len(report.failures) == 1
    assert not report.ok
