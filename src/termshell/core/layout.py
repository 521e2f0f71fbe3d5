"""Column layout engine: width resolution, word wrapping and row formatting.

Column widths are given as a list of specs:

* an ``int`` (or an integer string) — a fixed number of characters;
* a string ending in ``%`` — a share of the space left after the fixed
  columns (and separators) are allocated;
* ``"*"`` — the single fluid column that takes whatever remains.

When no fluid column is given the remainder goes to the **last**
column. Lengths are measured in code points, so multibyte text wraps
on characters rather than bytes.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, Union

from termshell.core.protocols import Colorizer
from termshell.exceptions import ConfigurationError

ColumnWidthSpec = Union[int, str]

FLUID = "*"
LINE_BREAK = "\n"
DEFAULT_MAX_WIDTH = 75


def _is_plain(separator: str) -> bool:
    """Plain separators sit only between columns; others also frame the row."""
    return separator in ("", " ")


def separator_overhead(column_count: int, separator: str) -> int:
    """Characters consumed by separators for *column_count* columns."""
    if column_count <= 0:
        return 0
    if _is_plain(separator):
        return (column_count - 1) * len(separator)
    return (column_count + 1) * len(separator)


def _fixed_width(spec: Any) -> int | None:
    """Return the width of a fixed spec, ``None`` if *spec* is not fixed."""
    if isinstance(spec, bool):
        return None
    if isinstance(spec, int):
        value = spec
    elif isinstance(spec, str):
        try:
            value = int(spec)
        except ValueError:
            return None
        if str(value) != spec:
            return None
    else:
        return None
    if value < 0:
        raise ConfigurationError(f"Unknown column format {spec!r}")
    return value


def _percentage(spec: Any) -> float | None:
    if not isinstance(spec, str) or not spec.endswith("%"):
        return None
    try:
        return float(spec[:-1])
    except ValueError:
        raise ConfigurationError(f"Unknown column format {spec!r}") from None


def resolve_widths(
    specs: Sequence[ColumnWidthSpec],
    max_width: int,
    separator: str = " ",
) -> list[int]:
    """Resolve width *specs* into concrete column widths.

    The result has one entry per spec; together with the separator
    overhead it adds up to *max_width*.

    Raises
    ------
    ConfigurationError
        On an unknown spec, a second fluid column, or when the fixed
        and percentage columns need more than *max_width*.
    """
    specs = list(specs)
    if not specs:
        return []

    fixed = separator_overhead(len(specs), separator)
    fluid: int | None = None
    widths: list[int] = [0] * len(specs)
    percentages: dict[int, float] = {}

    # first pass: validate, sum fixed columns
    for idx, spec in enumerate(specs):
        width = _fixed_width(spec)
        if width is not None:
            widths[idx] = width
            fixed += width
            continue
        percent = _percentage(spec)
        if percent is not None:
            percentages[idx] = percent
            continue
        if spec == FLUID:
            if fluid is not None:
                raise ConfigurationError("Only one fluid column allowed!")
            fluid = idx
            continue
        raise ConfigurationError(f"Unknown column format {spec!r}")

    allocated = fixed
    remain = max_width - allocated

    # second pass: percentages of what the fixed columns left over
    for idx, percent in percentages.items():
        width = math.floor(percent * remain / 100)
        widths[idx] = width
        allocated += width

    remain = max_width - allocated
    if remain < 0:
        raise ConfigurationError(
            "Wanted column widths exceed available space",
            hint=f"Requested {allocated} characters, only {max_width} available.",
        )

    if fluid is None:
        widths[-1] += remain
    else:
        widths[fluid] = remain
    return widths


def wordwrap(text: str, width: int = DEFAULT_MAX_WIDTH, break_: str = LINE_BREAK, cut: bool = False) -> str:
    """Wrap *text* at spaces so lines fit in *width* characters.

    Existing line breaks are kept. With *cut*, words longer than
    *width* are split so no line exceeds it.
    """
    if cut and width < 1:
        raise ValueError("width must be positive when cutting words")

    lines: list[str] = []
    for line in text.split(break_):
        line = line.rstrip()
        if len(line) <= width:
            lines.append(line)
            continue

        wrapped = ""
        actual = ""
        for word in line.split(" "):
            if len(actual + word) <= width:
                actual += word + " "
                continue
            if actual:
                wrapped += actual.rstrip() + break_
            actual = word
            if cut:
                while len(actual) > width:
                    wrapped += actual[:width] + break_
                    actual = actual[width:]
            actual += " "
        wrapped += actual.strip()
        lines.append(wrapped)
    return break_.join(lines)


def _attribute_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


class TableLayout:
    """Displays text in multiple word-wrapped columns.

    Parameters
    ----------
    colorizer:
        Applies color and attribute escapes to cells; usually the
        terminal sink.
    max_width:
        Total width to lay columns out in, typically the terminal width.
    separator:
        String printed between columns. Anything other than a single
        space (or nothing) also frames each row.
    """

    def __init__(
        self,
        colorizer: Colorizer,
        max_width: int = DEFAULT_MAX_WIDTH,
        separator: str = " ",
    ) -> None:
        self._colorizer = colorizer
        self.max_width: int = max_width
        self.separator: str = separator
        self.column_specs: list[ColumnWidthSpec] = [FLUID]
        self.column_aligns: list[str] = []
        self.column_attrs: list[Sequence[str]] = []

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    def set_column_widths(self, specs: Sequence[ColumnWidthSpec]) -> TableLayout:
        """Set default width specs; they are validated immediately."""
        resolve_widths(specs, self.max_width, self.separator)
        self.column_specs = list(specs)
        return self

    def set_column_aligns(self, aligns: Sequence[str] = ()) -> TableLayout:
        self.column_aligns = list(aligns)
        return self

    def set_column_attrs(self, attrs: Sequence[Sequence[str]] = ()) -> TableLayout:
        self.column_attrs = list(attrs)
        return self

    @property
    def column_widths(self) -> list[int]:
        """Default specs resolved against the current width and separator."""
        return resolve_widths(self.column_specs, self.max_width, self.separator)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def format_row(
        self,
        texts: Sequence[Any],
        colors: Sequence[str | None] = (),
        column_widths: Sequence[ColumnWidthSpec] | None = None,
        column_aligns: Sequence[str] | None = None,
        column_attrs: Sequence[Any] | None = None,
    ) -> str:
        """Lay *texts* out in columns and return the physical lines.

        Missing texts render as blank cells. Alignment is ``"left"``
        unless ``"right"`` is given for a column.
        """
        widths = (
            resolve_widths(column_widths, self.max_width, self.separator)
            if column_widths
            else self.column_widths
        )
        aligns = list(column_aligns) if column_aligns else self.column_aligns
        attrs = list(column_attrs) if column_attrs else self.column_attrs

        wrapped: list[list[str]] = []
        for col, width in enumerate(widths):
            raw = texts[col] if col < len(texts) else None
            text = "" if raw is None else str(raw)
            if width <= 0:
                wrapped.append([""])
                continue
            wrapped.append(
                [line.lstrip() for line in wordwrap(text, width, LINE_BREAK, cut=True).split(LINE_BREAK)]
            )

        height = max((len(lines) for lines in wrapped), default=0)
        out: list[str] = []
        for row in range(height):
            chunks: list[str] = []
            for col, width in enumerate(widths):
                lines = wrapped[col]
                value = lines[row] if row < len(lines) else ""
                right = col < len(aligns) and aligns[col] == "right"
                chunk = value.rjust(width) if right else value.ljust(width)

                color = colors[col] if col < len(colors) and colors[col] else None
                attr = _attribute_list(attrs[col]) if col < len(attrs) else ()
                if color or attr:
                    chunk = self._colorizer.colorize_text(chunk, color, None, attr)
                chunks.append(chunk)

            if _is_plain(self.separator):
                out.append(self.separator.join(chunks))
            else:
                out.append(self.separator + self.separator.join(chunks) + self.separator)

        return LINE_BREAK.join(out)
