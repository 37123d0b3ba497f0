"""Textual help browser and CLI for a compiled site configuration."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Optional, Sequence

try:  # pragma: no cover - import guard only
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import DataTable, Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use sitekeys.adapters.textual.app"
    ) from exc

from sitekeys.config import SiteConfig, env_setting, load_config, load_config_object
from sitekeys.help import MODE_LABELS, HelpSection, build_help, format_help
from sitekeys.host import HostStats, InMemoryHost
from sitekeys.keymaps import CompileReport, bootstrap
from sitekeys.keymaps.defaults import HOST_DEFAULTS, HOST_SEARCH_ALIASES, demo_config

COLUMNS = ("Category", "Key", "Mode", "Description", "Domain")


def create_demo_host() -> InMemoryHost:
    """Host pre-seeded with the factory keys the demo config remaps."""

    return InMemoryHost(
        defaults=HOST_DEFAULTS,
        default_search_aliases=HOST_SEARCH_ALIASES,
        logger_name="sitekeys.host",
    )


def compile_config(
    config: SiteConfig, host: Optional[InMemoryHost] = None
) -> tuple[CompileReport, list[HelpSection]]:
    report = bootstrap(
        config, host or create_demo_host(), logger_name="sitekeys.keymaps"
    )
    return report, build_help(report.registered)


def stats_line(stats: HostStats) -> str:
    modes = ", ".join(MODE_LABELS.get(mode, mode) for mode in stats.modes)
    return (
        f"host: {stats.binding_count} bindings ({modes or 'no modes'}), "
        f"{stats.search_alias_count} search aliases"
    )


def help_rows(
    sections: Iterable[HelpSection], query: str = ""
) -> list[tuple[str, str, str, str, str]]:
    """Flatten sections into table rows, keeping those containing ``query``."""

    needle = query.strip().lower()
    rows: list[tuple[str, str, str, str, str]] = []
    for section in sections:
        for entry in section.entries:
            row = (
                section.title,
                entry.key,
                MODE_LABELS.get(entry.mode, entry.mode),
                entry.description,
                entry.domain,
            )
            if needle and not any(needle in cell.lower() for cell in row):
                continue
            rows.append(row)
    return rows


class SiteKeysHelpApp(App[None]):
    """Browsable table of every visible binding."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#filter {
		height: 3;
	}

	#bindings {
		height: 1fr;
	}

	#summary {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        sections: Sequence[HelpSection],
        *,
        failures: int = 0,
        stats: Optional[HostStats] = None,
    ) -> None:
        super().__init__()
        self._sections = list(sections)
        self._failures = failures
        self._stats = stats
        self._query = ""

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical():
            yield Input(placeholder="Filter bindings", id="filter")
            yield DataTable(id="bindings", zebra_stripes=True)
        yield Static("", id="summary")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_columns(*COLUMNS)
        self._refresh_rows()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.apply_filter(event.value)

    def apply_filter(self, query: str) -> None:
        self._query = query
        self._refresh_rows()

    def _refresh_rows(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        rows = help_rows(self._sections, self._query)
        table.add_rows(rows)
        summary = f"{len(rows)} bindings"
        if self._failures:
            summary += f", {self._failures} failed to register"
        if self._stats is not None:
            summary += f" | {stats_line(self._stats)}"
        self.query_one("#summary", Static).update(summary)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compile a site keybinding configuration and browse its help."
    )
    parser.add_argument(
        "--config",
        default=env_setting("CONFIG"),
        help="Config to load as 'package.module:attribute' (default: built-in demo)",
    )
    parser.add_argument(
        "--site-leader",
        default=env_setting("SITE_LEADER"),
        help="Override the leader used by site-specific bindings",
    )
    parser.add_argument(
        "--search-leader",
        default=env_setting("SEARCH_LEADER"),
        help="Override the leader used by search-engine bindings",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on malformed config sections instead of skipping them",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the help listing instead of starting the TUI",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.config:
        config = load_config_object(args.config, strict=args.strict)
    else:
        config = load_config(demo_config(), strict=args.strict)
    config = config.with_leaders(
        site_leader=args.site_leader, search_leader=args.search_leader
    )

    host = create_demo_host()
    report, sections = compile_config(config, host)
    stats = host.stats()
    if args.plain:
        print(format_help(sections))
        print(stats_line(stats), file=sys.stderr)
        for failure in report.failures:
            print(
                f"failed: {failure.alias} ({failure.mode}, {failure.domain}): "
                f"{failure.error}",
                file=sys.stderr,
            )
        return 1 if report.failures else 0

    SiteKeysHelpApp(sections, failures=len(report.failures), stats=stats).run()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
