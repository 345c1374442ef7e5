"""Stderr console for errors, hints and the doctor table.

Error messages and hints often quote ``peer`` output, which is full of
bracketed log prefixes such as ``[snapshot]`` or ``[channelCmd]``.  Rich
would read those as markup, so callers pass such text through
:func:`escape_markup` first.  Rich is imported lazily; without it the
proxy prints plain text to stderr, and ``--help``, ``--version`` and
direct-mode snapshots still work.  Operation output never goes through
this console: it is printed to stdout by the command handler.
"""

from __future__ import annotations

import sys
from typing import Any

from fabric_snapshot.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


def escape_markup(text: str) -> str:
    """Escape Rich markup in *text* so bracketed peer log prefixes print verbatim."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        # Plain stderr printing does not interpret markup.
        return text
    return escape(text)


class _ConsoleProxy:
    """Stderr printer used by the error boundary and ``doctor``."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()
