"""Rich console used for user-facing messages on stderr.

Library output (tables, help screens, shell text) goes through the
terminal sink; this console only carries the demo application's status
and error messages.
"""

from __future__ import annotations

from rich.console import Console


def get_rich_console() -> Console:
    """Create a Rich console instance targeting stderr."""
    return Console(stderr=True)


class _ConsoleProxy:
    """``print``-compatible proxy creating the console on each call.

    Creating it lazily keeps it bound to the current ``sys.stderr``,
    which pytest's ``capsys`` swaps per test.
    """

    def print(self, *objects: object) -> None:
        get_rich_console().print(*objects)


console = _ConsoleProxy()
