"""Bordered table built on top of :class:`~termshell.core.layout.TableLayout`.

Rows are formatted as they are added; :meth:`Table.render` only stacks
the stored strings between border lines, so rendering twice gives the
same result and changes nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from termshell.core.layout import (
    DEFAULT_MAX_WIDTH,
    LINE_BREAK,
    ColumnWidthSpec,
    TableLayout,
)
from termshell.core.protocols import Colorizer

CELL_SEPARATOR = "|"
BORDER_SEPARATOR = "+"
BORDER_CHAR = "-"


class Table:
    """Header plus body rows framed by ``+----+`` borders."""

    def __init__(self, colorizer: Colorizer, max_width: int = DEFAULT_MAX_WIDTH) -> None:
        self._layout = TableLayout(colorizer, max_width, CELL_SEPARATOR)
        self._header: str = ""
        self._rows: list[str] = []

    @property
    def layout(self) -> TableLayout:
        return self._layout

    def set_width(self, width: int) -> Table:
        self._layout.max_width = width
        return self

    def set_header(
        self,
        columns: Sequence[Any],
        column_widths: Sequence[ColumnWidthSpec],
        column_aligns: Sequence[str] = (),
        colors: Sequence[str | None] = (),
    ) -> Table:
        """Set column widths/alignments and format the bold header row."""
        self._layout.set_column_widths(column_widths)
        self._layout.set_column_aligns(column_aligns)
        self._header = self._layout.format_row(
            columns,
            colors,
            column_attrs=[("bold",)] * len(column_widths),
        )
        return self

    def add_row(
        self,
        columns: Sequence[Any],
        colors: Sequence[str | None] = (),
        column_aligns: Sequence[str] = (),
    ) -> Table:
        self._rows.append(self._layout.format_row(columns, colors, column_aligns=column_aligns))
        return self

    def add_rows(
        self,
        rows: Iterable[Any],
        colors: Sequence[str | None] = (),
        column_aligns: Sequence[str] = (),
    ) -> Table:
        """Add every sequence in *rows*; other items are skipped."""
        for row in rows:
            if isinstance(row, Sequence) and not isinstance(row, str):
                self.add_row(row, colors, column_aligns)
        return self

    @property
    def column_widths(self) -> list[int]:
        return self._layout.column_widths

    def border(self) -> str:
        """Border line matching the resolved column widths."""
        widths = self.column_widths
        if not widths:
            return ""
        cells = [BORDER_CHAR * width for width in widths]
        return BORDER_SEPARATOR + BORDER_SEPARATOR.join(cells) + BORDER_SEPARATOR

    def render(self) -> str:
        """Return the whole table, one trailing newline included."""
        border = self.border()
        parts: list[str] = []
        if border:
            parts.append(border)
        parts.append(self._header)
        if border:
            parts.append(border)
        parts.extend(self._rows)
        if border:
            parts.append(border)
        return LINE_BREAK.join(parts) + LINE_BREAK

    def __str__(self) -> str:
        return self.render()
