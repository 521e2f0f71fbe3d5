"""Tests for the secure-input strategy chain.

``msvcrt`` and ``stty`` are never touched: the Windows strategy gets an
injected ``getwch`` and the stty strategy an injected runner.
"""

from __future__ import annotations

import io
import subprocess
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from termshell.exceptions import UnsupportedCapabilityError
from termshell.infra.secure_input import (
    CONCEAL,
    RESET,
    AnsiConcealInput,
    SttyHiddenInput,
    WindowsHiddenInput,
    default_strategies,
    read_secure,
)
from termshell.infra.terminal import StdIO

MakeStdio = Callable[..., tuple[StdIO, io.StringIO]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _keys(text: str) -> Callable[[], str]:
    chars = iter(text)
    return lambda: next(chars)


class _Strategy:
    def __init__(self, name: str, result: str | None) -> None:
        self.name = name
        self.result = result
        self.calls: list[str] = []

    def try_read(self, prompt: str) -> str | None:
        self.calls.append(prompt)
        return self.result


def _runner(saved_mode: str = "saved-mode", returncode: int = 0) -> MagicMock:
    def run(args: list[str], **_kwargs: Any) -> subprocess.CompletedProcess[str]:
        stdout = saved_mode if args[1:] == ["-g"] else ""
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="")

    return MagicMock(side_effect=run)


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------

class TestWindowsHiddenInput:
    def test_unsupported_off_windows(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio()
        with patch.object(StdIO, "is_windows", return_value=False):
            assert WindowsHiddenInput(stdio).try_read("pw: ") is None

    def test_reads_until_enter(self, make_stdio: MakeStdio) -> None:
        stdio, out = make_stdio()
        assert WindowsHiddenInput(stdio, _keys("secret\r")).try_read("pw: ") == "secret"
        assert out.getvalue() == "pw: \n"

    def test_backspace_removes_char(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio()
        assert WindowsHiddenInput(stdio, _keys("ab\bc\n")).try_read("") == "ac"

    def test_ctrl_c_interrupts(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio()
        with pytest.raises(KeyboardInterrupt):
            WindowsHiddenInput(stdio, _keys("a\x03")).try_read("")


# ---------------------------------------------------------------------------
# stty
# ---------------------------------------------------------------------------

class TestSttyHiddenInput:
    def test_unsupported_without_tty(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio("secret\n")
        runner = _runner()
        assert SttyHiddenInput(stdio, runner).try_read("pw: ") is None
        runner.assert_not_called()

    def test_echo_off_then_restored(self, make_stdio: MakeStdio) -> None:
        stdio, out = make_stdio("secret\n")
        runner = _runner()
        with patch.object(StdIO, "has_stty", return_value=True), patch.object(
            StdIO, "is_interactive", new=True
        ):
            assert SttyHiddenInput(stdio, runner).try_read("pw: ") == "secret"
        calls = [call.args[0] for call in runner.call_args_list]
        assert calls == [["stty", "-g"], ["stty", "-echo"], ["stty", "saved-mode"]]
        assert out.getvalue() == "pw: \n"

    def test_mode_restored_when_read_fails(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio()
        runner = _runner()
        with patch.object(StdIO, "has_stty", return_value=True), patch.object(
            StdIO, "is_interactive", new=True
        ), patch.object(StdIO, "read", side_effect=KeyboardInterrupt):
            with pytest.raises(KeyboardInterrupt):
                SttyHiddenInput(stdio, runner).try_read("pw: ")
        assert runner.call_args_list[-1].args[0] == ["stty", "saved-mode"]

    def test_unsupported_when_stty_fails(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio("secret\n")
        with patch.object(StdIO, "has_stty", return_value=True), patch.object(
            StdIO, "is_interactive", new=True
        ):
            assert SttyHiddenInput(stdio, _runner(returncode=1)).try_read("pw: ") is None


# ---------------------------------------------------------------------------
# ANSI conceal
# ---------------------------------------------------------------------------

class TestAnsiConcealInput:
    def test_unsupported_without_color(self, make_stdio: MakeStdio) -> None:
        stdio, _ = make_stdio("secret\n")
        assert AnsiConcealInput(stdio).try_read("pw: ") is None

    def test_conceals_and_resets(self, make_stdio: MakeStdio) -> None:
        stdio, out = make_stdio("  secret \n", color=True)
        assert AnsiConcealInput(stdio).try_read("pw: ") == "secret"
        assert out.getvalue() == "pw: " + CONCEAL + RESET


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------

class TestReadSecure:
    def test_first_supported_strategy_wins(self) -> None:
        first, second, third = _Strategy("a", None), _Strategy("b", "pw"), _Strategy("c", "other")
        assert read_secure("p: ", [first, second, third]) == "pw"
        assert first.calls == ["p: "]
        assert third.calls == []

    def test_empty_string_is_a_result(self) -> None:
        assert read_secure("p: ", [_Strategy("a", "")]) == ""

    def test_all_unsupported_raises(self) -> None:
        with pytest.raises(UnsupportedCapabilityError, match="Secure input not supported.") as exc_info:
            read_secure("p: ", [_Strategy("a", None), _Strategy("b", None)])
        assert exc_info.value.hint

    def test_default_order(self, make_stdio: MakeStdio) -> None:
        names = [strategy.name for strategy in default_strategies(make_stdio()[0])]
        assert names == ["windows", "stty", "ansi"]
