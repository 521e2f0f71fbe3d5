"""Infrastructure: the terminal sink.

:class:`StdIO` writes raw text to an output stream and reads lines from
an input stream. Capability detection (is this a terminal, which color
system, how wide) is delegated to a probing :class:`rich.console.Console`;
ANSI escapes are produced by :class:`rich.style.Style` from the classic
color and attribute names listed below.

Rules
-----
* No layout logic — callers hand over finished text.
* Unknown color or attribute names are ignored, never an error.
"""

from __future__ import annotations

import os
import shutil
import sys
from collections.abc import Sequence
from typing import Any, TextIO

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

from termshell.config import DEFAULT_WIDTH, Settings

CR = "\r"
LF = "\n"
TAB = "\t"
EOL = os.linesep

FOREGROUND_COLORS: dict[str, str] = {
    "black": "black",
    "dark_gray": "bright_black",
    "blue": "blue",
    "light_blue": "bright_blue",
    "green": "green",
    "light_green": "bright_green",
    "cyan": "cyan",
    "light_cyan": "bright_cyan",
    "red": "red",
    "light_red": "bright_red",
    "purple": "magenta",
    "light_purple": "bright_magenta",
    "brown": "yellow",
    "yellow": "bright_yellow",
    "light_gray": "white",
    "white": "bright_white",
}

BACKGROUND_COLORS: dict[str, str] = {
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "magenta": "magenta",
    "cyan": "cyan",
    "light_gray": "white",
}

TEXT_ATTRIBUTES: dict[str, str | None] = {
    "reset": None,
    "bold": "bold",
    "low_intensity": "dim",
    "underline": "underline",
    "blink": "blink",
    "invert_color": "reverse",
    "invisible": "conceal",
}


class StdIO:
    """Terminal sink over a pair of text streams.

    Parameters
    ----------
    stream:
        Output stream, ``sys.stdout`` by default.
    stdin:
        Input stream, ``sys.stdin`` by default.
    width:
        Fixed width; detected from the terminal when omitted.
    color:
        Force color support on or off; detected when omitted.
    settings:
        Environment settings supplying *width*/*color* defaults.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        stdin: TextIO | None = None,
        *,
        width: int | None = None,
        color: bool | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._stream: TextIO = stream if stream is not None else sys.stdout
        self._stdin: TextIO = stdin if stdin is not None else sys.stdin
        self._console = Console(file=self._stream)

        if settings is not None:
            width = settings.width if width is None else width
            color = settings.color if color is None else color

        if color is None:
            color = self._console.is_terminal and self._console.color_system is not None
        self._has_color_support: bool = color
        self._color_enabled: bool = True

        if width is None:
            width = self._console.width if self._console.is_terminal else DEFAULT_WIDTH
        self._width: int = width

        self._foreground: str | None = None
        self._background: str | None = None
        self._attributes: tuple[str, ...] = ()

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def has_color_support(self) -> bool:
        return self._has_color_support

    @property
    def color_enabled(self) -> bool:
        return self._color_enabled

    def enable_color(self, enabled: bool = True) -> None:
        self._color_enabled = enabled

    @property
    def is_interactive(self) -> bool:
        """``True`` when the input stream is a terminal."""
        isatty = getattr(self._stdin, "isatty", None)
        return bool(isatty and isatty())

    @property
    def foreground_colors(self) -> list[str]:
        return list(FOREGROUND_COLORS)

    @property
    def background_colors(self) -> list[str]:
        return list(BACKGROUND_COLORS)

    @property
    def text_attributes(self) -> list[str]:
        return list(TEXT_ATTRIBUTES)

    @staticmethod
    def is_windows() -> bool:
        return os.name == "nt"

    @staticmethod
    def has_stty() -> bool:
        return shutil.which("stty") is not None

    # ------------------------------------------------------------------
    # Styling
    # ------------------------------------------------------------------

    def colorize_text(
        self,
        text: str,
        foreground: str | None = None,
        background: str | None = None,
        attributes: Sequence[str] = (),
    ) -> str:
        """Wrap *text* in ANSI escapes when color is supported and enabled."""
        if text == "" or not (self._has_color_support and self._color_enabled):
            return text

        style_args: dict[str, Any] = {}
        if foreground and foreground in FOREGROUND_COLORS:
            style_args["color"] = FOREGROUND_COLORS[foreground]
        if background and background in BACKGROUND_COLORS:
            style_args["bgcolor"] = BACKGROUND_COLORS[background]
        for attribute in attributes or ():
            flag = TEXT_ATTRIBUTES.get(attribute)
            if flag:
                style_args[flag] = True

        if not style_args:
            return text
        return Style(**style_args).render(text, color_system=ColorSystem.STANDARD)

    def set_color(self, foreground: str | None = None, background: str | None = None) -> StdIO:
        """Color the next :meth:`write` only."""
        self._foreground = foreground
        self._background = background
        return self

    def set_attr(self, attributes: Sequence[str] = ()) -> StdIO:
        """Apply text attributes to the next :meth:`write` only."""
        self._attributes = tuple(attributes)
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, text: str | Sequence[str], newlines: int = 0) -> None:
        if not isinstance(text, str):
            text = EOL.join(text)
        if self._foreground or self._background or self._attributes:
            text = self.colorize_text(text, self._foreground, self._background, self._attributes)
            self._foreground = self._background = None
            self._attributes = ()
        self._stream.write(text + EOL * newlines)
        self._stream.flush()

    def writeln(self, text: str | Sequence[str]) -> None:
        self.write(text, 1)

    def ln(self, count: int = 1) -> StdIO:
        """Print *count* blank newlines."""
        self.write("", count)
        return self

    def hr(self, size: int = 0, char: str = "-") -> StdIO:
        """Print a horizontal rule, terminal-wide unless *size* is given."""
        self.writeln(char * (size or self._width))
        return self

    def overwrite(self, text: str) -> None:
        self.write(CR + text)

    def clear(self) -> StdIO:
        """Clear the screen (no-op on Windows)."""
        if not self.is_windows():
            self._console.clear()
        return self

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def read(self, prompt: str = "") -> str | None:
        """Read one line from the input stream; ``None`` at end of input."""
        if prompt:
            self.write(prompt)
        line = self._stdin.readline()
        if line == "":
            return None
        return line.rstrip("\r\n")
