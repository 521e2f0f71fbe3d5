"""Shared pytest fixtures and configuration for the termshell test suite.

Guidelines
----------
* No real terminal: sinks write to ``io.StringIO``.
* Line editors are scripted fakes; ``stty`` and ``msvcrt`` are injected.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Iterable

import pytest

from termshell.infra.terminal import StdIO


class ScriptedLineEditor:
    """Replays fixed input lines, then reports end of input."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)
        self.prompts: list[str] = []
        self.remembered: list[str] = []

    def read_line(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self._lines:
            return None
        return self._lines.pop(0)

    def remember(self, line: str) -> None:
        self.remembered.append(line)


def _make_stdio(
    stdin_text: str = "",
    *,
    width: int = 40,
    color: bool = False,
) -> tuple[StdIO, io.StringIO]:
    """Return a sink over fresh string streams plus its output buffer."""
    out = io.StringIO()
    return StdIO(out, io.StringIO(stdin_text), width=width, color=color), out


@pytest.fixture()
def stdio_pair() -> tuple[StdIO, io.StringIO]:
    return _make_stdio()


@pytest.fixture()
def stdio(stdio_pair: tuple[StdIO, io.StringIO]) -> StdIO:
    return stdio_pair[0]


@pytest.fixture()
def output(stdio_pair: tuple[StdIO, io.StringIO]) -> io.StringIO:
    return stdio_pair[1]


@pytest.fixture()
def color_stdio() -> StdIO:
    return _make_stdio(color=True)[0]


@pytest.fixture()
def make_stdio() -> Callable[..., tuple[StdIO, io.StringIO]]:
    """Factory fixture: ``make_stdio(stdin_text, width=..., color=...)``."""
    return _make_stdio


@pytest.fixture()
def plain_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove variables that make Rich treat any stream as a terminal."""
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def scripted_editor() -> type[ScriptedLineEditor]:
    return ScriptedLineEditor
