"""Infrastructure: reading a line without echoing it.

Each strategy checks whether it can work on this platform/terminal and
returns ``None`` when it cannot; :func:`read_secure` walks them in
order and fails only when none applies.

Order
-----
1. :class:`WindowsHiddenInput` — console reads via :mod:`msvcrt`.
2. :class:`SttyHiddenInput` — ``stty -echo`` around a normal read.
3. :class:`AnsiConcealInput` — the "invisible" text attribute.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from termshell.core.protocols import SecureInputStrategy
from termshell.exceptions import UnsupportedCapabilityError
from termshell.infra.terminal import StdIO

logger = logging.getLogger(__name__)

CONCEAL = "\033[8m"
RESET = "\033[0m"


class WindowsHiddenInput:
    """Read characters from the Windows console without echo."""

    name = "windows"

    def __init__(self, sink: StdIO, getwch: Callable[[], str] | None = None) -> None:
        self._sink = sink
        self._getwch = getwch

    def try_read(self, prompt: str) -> str | None:
        getwch = self._getwch
        if getwch is None:
            if not self._sink.is_windows():
                return None
            import msvcrt

            getwch = msvcrt.getwch

        self._sink.write(prompt)
        chars: list[str] = []
        while True:
            char = getwch()
            if char in ("\r", "\n"):
                break
            if char == "\x03":
                raise KeyboardInterrupt
            if char == "\b":
                if chars:
                    chars.pop()
                continue
            chars.append(char)
        self._sink.ln()
        return "".join(chars).rstrip()


class SttyHiddenInput:
    """Turn terminal echo off with ``stty`` for the duration of one read."""

    name = "stty"

    def __init__(self, sink: StdIO, runner: Callable[..., Any] = subprocess.run) -> None:
        self._sink = sink
        self._run = runner

    def _stty(self, *args: str) -> subprocess.CompletedProcess[str]:
        return self._run(["stty", *args], capture_output=True, text=True, check=False)

    def try_read(self, prompt: str) -> str | None:
        if not (self._sink.has_stty() and self._sink.is_interactive):
            return None

        saved = self._stty("-g")
        if saved.returncode != 0:
            logger.debug("stty -g failed: %s", saved.stderr.strip())
            return None
        mode = saved.stdout.strip()

        self._sink.write(prompt)
        self._stty("-echo")
        try:
            line = self._sink.read()
        finally:
            self._stty(mode)
        self._sink.ln()
        return (line or "").strip()


class AnsiConcealInput:
    """Hide typed text with the concealed attribute on color terminals."""

    name = "ansi"

    def __init__(self, sink: StdIO) -> None:
        self._sink = sink

    def try_read(self, prompt: str) -> str | None:
        if not self._sink.has_color_support:
            return None
        line = self._sink.read(prompt + CONCEAL)
        self._sink.write(RESET)
        return (line or "").strip()


def default_strategies(sink: StdIO) -> list[SecureInputStrategy]:
    return [WindowsHiddenInput(sink), SttyHiddenInput(sink), AnsiConcealInput(sink)]


def read_secure(prompt: str, strategies: Sequence[SecureInputStrategy]) -> str:
    """Return hidden input from the first strategy that supports it.

    Raises
    ------
    UnsupportedCapabilityError
        If no strategy can hide input on this terminal.
    """
    for strategy in strategies:
        value = strategy.try_read(prompt)
        if value is not None:
            logger.debug("Secure input read via %s", strategy.name)
            return value
        logger.debug("Secure input strategy %s unavailable", strategy.name)
    raise UnsupportedCapabilityError(
        "Secure input not supported.",
        hint="Run from an interactive terminal, or provide the value another way.",
    )
