"""Help listing: compiled registrations grouped by category."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sitekeys.keymaps.categories import Category
from sitekeys.keymaps.domains import GLOBAL_DOMAIN
from sitekeys.keymaps.models import Registration

MODE_LABELS = {"n": "normal", "v": "visual"}


@dataclass(frozen=True, slots=True)
class HelpEntry:
    mode: str
    key: str
    description: str
    domain: str = GLOBAL_DOMAIN


@dataclass(frozen=True, slots=True)
class HelpSection:
    category: Category
    entries: tuple[HelpEntry, ...]

    @property
    def title(self) -> str:
        return self.category.value


def _strip_tag(registration: Registration) -> str:
    tag = registration.category.tag
    text = registration.description
    if text.startswith(tag):
        text = text[len(tag) :]
    return text.strip()


def build_help(registrations: Iterable[Registration]) -> list[HelpSection]:
    """Group visible registrations by category.

    Sections follow ``Category`` declaration order. A key re-bound later in the
    same mode and scope replaces the earlier entry, as it does at the host.
    """

    latest: dict[tuple[str, str, str, str], Registration] = {}
    for registration in registrations:
        scope = registration.predicate.source if registration.predicate else ""
        slot = (registration.mode, registration.key, registration.domain, scope)
        latest.pop(slot, None)
        latest[slot] = registration

    grouped: dict[Category, list[HelpEntry]] = {}
    for registration in latest.values():
        if registration.hide:
            continue
        grouped.setdefault(registration.category, []).append(
            HelpEntry(
                mode=registration.mode,
                key=registration.key,
                description=_strip_tag(registration),
                domain=registration.domain,
            )
        )

    return [
        HelpSection(category, tuple(grouped[category]))
        for category in Category
        if category in grouped
    ]


def format_help(sections: Iterable[HelpSection]) -> str:
    lines: list[str] = []
    for section in sections:
        if lines:
            lines.append("")
        lines.append(f"[{section.title}]")
        width = max(len(entry.key) for entry in section.entries)
        for entry in section.entries:
            scope = "" if entry.domain == GLOBAL_DOMAIN else f"  ({entry.domain})"
            mode = MODE_LABELS.get(entry.mode, entry.mode)
            lines.append(
                f"  {entry.key.ljust(width)}  {mode:<6}  {entry.description}{scope}"
            )
    return "\n".join(lines)


__all__ = ["HelpEntry", "HelpSection", "MODE_LABELS", "build_help", "format_help"]
