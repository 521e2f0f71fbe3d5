"""Protocols (interfaces) for the external collaborators.

The core never talks to a terminal directly. Layout code only needs a
:class:`Colorizer`; the shell loop needs a :class:`TerminalSink` and a
:class:`LineEditor`; secure input is a chain of
:class:`SecureInputStrategy` objects. Infrastructure adapters satisfy
these structurally.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class Colorizer(Protocol):
    """Wraps text in terminal color/attribute escapes."""

    def colorize_text(
        self,
        text: str,
        foreground: str | None = None,
        background: str | None = None,
        attributes: Sequence[str] = (),
    ) -> str:
        """Return *text* wrapped in escapes, or unchanged without color."""
        ...  # pragma: no cover


class TerminalSink(Colorizer, Protocol):
    """Raw terminal output and input."""

    @property
    def width(self) -> int:
        """Terminal width in character cells."""
        ...  # pragma: no cover

    @property
    def has_color_support(self) -> bool:
        ...  # pragma: no cover

    def write(self, text: str | Sequence[str], newlines: int = 0) -> None:
        """Write *text* (lists are joined by newlines) plus *newlines*."""
        ...  # pragma: no cover

    def writeln(self, text: str | Sequence[str]) -> None:
        ...  # pragma: no cover

    def overwrite(self, text: str) -> None:
        """Return to the line start and write *text* without a newline."""
        ...  # pragma: no cover

    def read(self, prompt: str = "") -> str | None:
        """Read one line, ``None`` at end of input."""
        ...  # pragma: no cover


class LineEditor(Protocol):
    """Line-editing provider used by the interactive shell."""

    def read_line(self, prompt: str) -> str | None:
        """Read one line; ``None`` signals end of input."""
        ...  # pragma: no cover

    def remember(self, line: str) -> None:
        """Append *line* to the persistent history."""
        ...  # pragma: no cover


class SecureInputStrategy(Protocol):
    """One way of reading a line without echoing it."""

    name: str

    def try_read(self, prompt: str) -> str | None:
        """Read hidden input, or return ``None`` if unsupported here."""
        ...  # pragma: no cover
