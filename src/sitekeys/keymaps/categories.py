"""Fixed category tags used to group bindings in help listings."""

from __future__ import annotations

from enum import Enum

from sitekeys.errors import UnknownCategoryError


class Category(str, Enum):
    """Help-listing category; the value is the tag rendered as ``#<tag>``."""

    HELP = "help"
    MOUSE_CLICK = "mouseClick"
    SCROLL = "scroll"
    TABS = "tabs"
    PAGE_NAV = "pageNav"
    SESSIONS = "sessions"
    SEARCH_SELECTED_WITH = "searchSelectedWith"
    CLIPBOARD = "clipboard"
    OMNIBAR = "omnibar"
    VISUAL_MODE = "visualMode"
    VIM_MARKS = "vimMarks"
    SETTINGS = "settings"
    CHROME_URLS = "chromeURLs"
    PROXY = "proxy"
    MISC = "misc"
    INSERT_MODE = "insertMode"

    @property
    def tag(self) -> str:
        return f"#{self.value}"


def lookup_category(name: Category | str | None) -> Category:
    """Resolve ``name`` to a ``Category``; ``None`` means ``misc``."""

    if name is None:
        return Category.MISC
    if isinstance(name, Category):
        return name
    try:
        return Category(name)
    except ValueError:
        pass
    # Also accept the member name, e.g. "MOUSE_CLICK".
    member = Category.__members__.get(str(name).upper())
    if member is None:
        raise UnknownCategoryError(name)
    return member


__all__ = ["Category", "lookup_category"]
