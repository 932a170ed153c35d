"""Shared Rich Console with the catalog's colour theme.

Command handlers and the output helpers print through this one console so
styles such as ``status.placed`` resolve the same everywhere.
"""

from rich.console import Console
from rich.theme import Theme

CATALOG_THEME = Theme({
    "status.available": "bold yellow",
    "status.placed": "bold blue",
    "log.debug": "cyan",
    "log.success": "green",
    "log.warning": "yellow",
    "log.error": "bold red",
    "muted": "dim",
})

_console: Console | None = None


def get_console() -> Console:
    """Get or create the themed console."""
    global _console
    if _console is None:
        _console = Console(theme=CATALOG_THEME)
    return _console
