"""Textual front-end for browsing compiled bindings."""

from .app import (
    SiteKeysHelpApp,
    compile_config,
    create_demo_host,
    help_rows,
    main,
    stats_line,
)

__all__ = [
    "SiteKeysHelpApp",
    "compile_config",
    "create_demo_host",
    "help_rows",
    "main",
    "stats_line",
]
