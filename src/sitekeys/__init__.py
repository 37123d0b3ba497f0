"""Declarative per-site keybinding compiler."""

__all__ = [
    "adapters",
    "config",
    "errors",
    "help",
    "host",
    "keymaps",
    "runtime",
]

__version__ = "0.1.0"
