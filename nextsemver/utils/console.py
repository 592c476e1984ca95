"""
Terminal output for nextsemver using Rich.

Everything printed here goes to **stderr**: stdout is reserved for
``name=value`` outputs and ``--format json`` documents, which other tools
parse. Diagnostics belong in :mod:`nextsemver.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

NEXTSEMVER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "version": "bold magenta",
        "dim": "dim",
    }
)

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if stderr is an interactive terminal outside CI."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def _get_console() -> Console:
    global _console

    with _console_lock:
        if _console is None:
            use_color = _should_use_color()
            _console = Console(
                theme=NEXTSEMVER_THEME,
                stderr=True,
                no_color=not use_color,
                highlight=False,
            )
        return _console


def reconfigure_console() -> None:
    """Drop the cached console so the next print re-reads the environment."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the shared Rich Console."""
    return _get_console()


def _status(style: str, prefix: str, message: str) -> None:
    # Messages carry paths and TOML table names such as [project]
    _get_console().print(f"{prefix} {message}", style=style, markup=False)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _status("success", prefix, message)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _status("error", prefix, message)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _status("warning", prefix, message)


def print_table(
    data: Sequence[Mapping[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render rows of ``{header: value}`` as a Rich table.

    Args:
        data: Rows; nothing is printed when empty.
        headers: Column order. Defaults to the keys of the first row.
        title: Optional table title.
        column_styles: Per-column ``style``/``justify``/``no_wrap`` options.
    """
    if not data:
        return

    columns = headers or list(data[0])
    styles = column_styles or {}

    table = Table(title=title, header_style="bold")
    for name in columns:
        options = styles.get(name, {})
        table.add_column(
            name,
            style=options.get("style"),
            justify=options.get("justify", "left"),
            no_wrap=options.get("no_wrap", False),
        )

    for row in data:
        table.add_row(*(str(row.get(name, "")) for name in columns))

    _get_console().print(table)
