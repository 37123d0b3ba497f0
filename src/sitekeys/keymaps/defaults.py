"""Built-in demo declarations and the factory keys an in-memory host starts with."""

from __future__ import annotations

from typing import Any, Callable, Dict

from sitekeys.runtime import telemetry

from .categories import Category

SITE_LEADER = "r"
SEARCH_LEADER = "o"

# Keys a freshly started host already knows, so remaps have something to copy.
HOST_DEFAULTS: Dict[str, Dict[str, str]] = {
    "n": {
        "j": "Scroll down",
        "k": "Scroll up",
        "d": "Scroll half page down",
        "e": "Scroll half page up",
        "f": "Open a link",
        "gf": "Open a link in non-active new tab",
        "E": "Go one tab left",
        "R": "Go one tab right",
        "S": "Go back in history",
        "D": "Go forward in history",
        "L": "Open a link in new window",
        ":": "Open commands",
        "r": "Reload the page",
        "q": "Click on an image or a button",
        "Q": "Open omnibar for word translation",
        "p": "Enter ephemeral PassThrough mode",
        "yp": "Copy form data for POST on current page",
    },
    "v": {
        "h": "backward character",
        "l": "forward character",
        "j": "forward line",
        "k": "backward line",
    },
}

HOST_SEARCH_ALIASES: Dict[str, tuple[str, ...]] = {
    "s": ("g", "d", "b", "e", "w", "s", "h", "y"),
}


def _announce(action: str) -> Callable[[], None]:
    def callback() -> None:
        telemetry.record_event("demo.callback", data={"action": action})

    return callback


def demo_config() -> Dict[str, Any]:
    """A small declaration set exercising every section of the config."""

    maps: Dict[str, list[Dict[str, Any]]] = {
        "global": [
            {
                "alias": f"{SITE_LEADER}h",
                "category": Category.SETTINGS,
                "description": "Command mode",
                "callback": _announce("open-commands"),
            },
            {
                "alias": "P",
                "map": "S",
                "category": Category.TABS,
                "description": "Go back in history",
            },
            {
                "alias": "N",
                "map": "R",
                "category": Category.TABS,
                "description": "Go to tab on right",
            },
            {
                "alias": "s",
                "map": "f",
                "category": Category.MOUSE_CLICK,
                "description": "Open a link in active tab",
            },
            {
                "alias": "n",
                "map": "d",
                "category": Category.SCROLL,
                "description": "Scroll half page down",
            },
            {
                "alias": "u",
                "map": "k",
                "category": Category.SCROLL,
                "description": "Scroll up",
            },
        ],
        "github.com": [
            {
                "alias": "s",
                "category": Category.PAGE_NAV,
                "description": "Toggle star",
                "callback": _announce("github-star"),
            },
            {
                "alias": "y",
                "category": Category.CLIPBOARD,
                "description": "Copy project path",
                "callback": _announce("github-copy-path"),
            },
        ],
        "home.nest.com": [
            {
                "alias": "=",
                "category": Category.MISC,
                "description": "Increment temperature",
                "path": "/thermostat/DEVICE_.*",
                "callback": _announce("nest-up"),
            },
        ],
        "wikipedia.org": [
            {
                "alias": "s",
                "category": Category.PAGE_NAV,
                "description": "Toggle simple version of current article",
                "callback": _announce("wikipedia-simple"),
            },
        ],
        "doi.org": [
            {
                "alias": "O",
                "description": "Open DOI",
                "callback": _announce("open-doi"),
                "hide": True,
            },
        ],
    }
    vmaps = {
        "global": [
            {
                "alias": "<ArrowRight>",
                "map": "l",
                "category": Category.VISUAL_MODE,
                "description": "forward character",
            },
            {
                "alias": "<ArrowLeft>",
                "map": "h",
                "category": Category.VISUAL_MODE,
                "description": "backward character",
            },
        ],
    }
    return {
        "settings": {"hintAlign": "left", "omnibarSuggestionTimeout": 500},
        "unmaps": {
            "mappings": ["L", ":", "r", "q", "Q", "p", "yp"],
            "vmappings": [],
            "searchAliases": {"s": list(HOST_SEARCH_ALIASES["s"])},
        },
        "searchEngines": {
            "duckduckgo": {
                "alias": "d",
                "name": "DuckDuckGo",
                "search": "https://duckduckgo.com/?q=",
                "compl": "https://duckduckgo.com/ac/?q=",
                "favicon": "https://duckduckgo.com/favicon.ico",
            },
            "wikipedia": {
                "alias": "w",
                "name": "Wikipedia",
                "search": "https://en.wikipedia.org/w/index.php?search=",
                "favicon": "https://en.wikipedia.org/favicon.ico",
            },
        },
        "keys": {
            "maps": maps,
            "vmaps": vmaps,
            "aliases": {
                "wikipedia.org": ["wiktionary.org", "wikiquote.org"],
            },
        },
        "siteleader": SITE_LEADER,
        "searchleader": SEARCH_LEADER,
    }


__all__ = [
    "HOST_DEFAULTS",
    "HOST_SEARCH_ALIASES",
    "SEARCH_LEADER",
    "SITE_LEADER",
    "demo_config",
]
