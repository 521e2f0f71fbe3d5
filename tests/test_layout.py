"""Tests for the column layout engine.

Covers:
* Separator overhead for plain and framing separators.
* Width resolution: fixed, percentage, fluid and last-column remainder.
* Configuration errors for unknown specs, two fluid columns, overflow.
* Multibyte-safe word wrapping with and without hard cuts.
* Row formatting: alignment, padding, wrapping, framing, colors.
"""

from __future__ import annotations

import pytest

from termshell.core.layout import (
    TableLayout,
    resolve_widths,
    separator_overhead,
    wordwrap,
)
from termshell.exceptions import ConfigurationError
from termshell.infra.terminal import StdIO


# ---------------------------------------------------------------------------
# Separator overhead
# ---------------------------------------------------------------------------

class TestSeparatorOverhead:
    def test_space_only_between_columns(self) -> None:
        assert separator_overhead(3, " ") == 2

    def test_empty_separator_costs_nothing(self) -> None:
        assert separator_overhead(3, "") == 0

    def test_framing_separator_wraps_row(self) -> None:
        assert separator_overhead(3, "|") == 4

    def test_multi_char_separator(self) -> None:
        assert separator_overhead(2, " | ") == 9

    def test_no_columns(self) -> None:
        assert separator_overhead(0, "|") == 0


# ---------------------------------------------------------------------------
# Width resolution
# ---------------------------------------------------------------------------

class TestResolveWidths:
    def test_fixed_and_fluid_single_space(self) -> None:
        assert resolve_widths([10, "*"], 30, " ") == [10, 19]

    def test_fixed_and_fluid_framed(self) -> None:
        assert resolve_widths([10, "*"], 30, "|") == [10, 17]

    def test_integer_strings_are_fixed(self) -> None:
        assert resolve_widths(["10", "*"], 30, " ") == [10, 19]

    def test_percentage_of_remaining_space(self) -> None:
        # 40 - 2 separators - 10 fixed = 28; half of it is 14
        assert resolve_widths([10, "50%", "*"], 40, " ") == [10, 14, 14]

    def test_percentage_is_floored(self) -> None:
        # remain = 11 - 1 = 10; 33% of 10 -> 3.3 -> 3
        assert resolve_widths(["33%", "*"], 11, " ") == [3, 7]

    def test_fractional_percentage(self) -> None:
        assert resolve_widths(["12.5%", "*"], 17, " ") == [2, 14]

    def test_remainder_goes_to_last_column_without_fluid(self) -> None:
        assert resolve_widths([10, 10], 30, " ") == [10, 19]

    def test_remainder_goes_to_last_not_largest(self) -> None:
        assert resolve_widths([20, 2], 30, " ") == [20, 9]

    def test_single_fluid_column(self) -> None:
        assert resolve_widths(["*"], 30, "|") == [28]

    def test_empty_specs(self) -> None:
        assert resolve_widths([], 30) == []

    def test_zero_width_is_legal(self) -> None:
        assert resolve_widths([0, "*"], 10, " ") == [0, 9]

    def test_fluid_may_resolve_to_zero(self) -> None:
        assert resolve_widths([9, "*"], 10, " ") == [9, 0]

    @pytest.mark.parametrize("max_width", [20, 37, 75, 120])
    @pytest.mark.parametrize("separator", ["", " ", "|", " | "])
    def test_widths_plus_overhead_fill_max_width(self, max_width: int, separator: str) -> None:
        specs = [5, "20%", "*", "10%"]
        widths = resolve_widths(specs, max_width, separator)
        assert len(widths) == len(specs)
        assert sum(widths) + separator_overhead(len(specs), separator) == max_width

    def test_growing_width_only_grows_fluid_beyond_percentages(self) -> None:
        narrow = resolve_widths([10, "50%", "*"], 40, " ")
        wide = resolve_widths([10, "50%", "*"], 60, " ")
        assert narrow[0] == wide[0] == 10
        assert wide[1] == (60 - 12) * 50 // 100
        assert wide[2] - narrow[2] == (60 - 40) - (wide[1] - narrow[1])

    def test_two_fluid_columns_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Only one fluid column allowed!"):
            resolve_widths(["*", 10, "*"], 30)

    @pytest.mark.parametrize("spec", ["wide", "10px", "%", "abc%", 1.5, None])
    def test_unknown_format_rejected(self, spec: object) -> None:
        with pytest.raises(ConfigurationError, match="Unknown column format"):
            resolve_widths([spec, "*"], 30)  # type: ignore[list-item]

    def test_negative_fixed_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown column format"):
            resolve_widths([-1, "*"], 30)

    def test_fixed_overflow_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="exceed available space") as exc_info:
            resolve_widths([50, "*"], 30)
        assert exc_info.value.hint is not None

    def test_percentage_overflow_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="exceed available space"):
            resolve_widths(["150%"], 20, " ")


# ---------------------------------------------------------------------------
# Word wrap
# ---------------------------------------------------------------------------

class TestWordwrap:
    def test_short_text_untouched(self) -> None:
        assert wordwrap("short", 10) == "short"

    def test_breaks_on_spaces(self) -> None:
        assert wordwrap("The quick brown fox", 10, cut=True) == "The quick\nbrown fox"

    def test_cut_splits_long_words(self) -> None:
        assert wordwrap("abcdefghij", 4, cut=True) == "abcd\nefgh\nij"

    def test_without_cut_long_words_overflow(self) -> None:
        assert wordwrap("abcdefghij", 4) == "abcdefghij"

    def test_existing_breaks_kept(self) -> None:
        assert wordwrap("one\ntwo", 10) == "one\ntwo"

    def test_custom_break(self) -> None:
        assert wordwrap("aaa bbb", 3, "<br>", cut=True) == "aaa<br>bbb"

    def test_multibyte_counts_characters(self) -> None:
        assert wordwrap("äöü äöü", 3, cut=True) == "äöü\näöü"

    def test_cut_requires_positive_width(self) -> None:
        with pytest.raises(ValueError):
            wordwrap("text", 0, cut=True)

    @pytest.mark.parametrize("width", [1, 3, 7, 12])
    def test_no_line_exceeds_width_with_cut(self, width: int) -> None:
        text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit"
        for line in wordwrap(text, width, cut=True).split("\n"):
            assert len(line) <= width

    def test_rejoining_reproduces_words(self) -> None:
        text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit"
        assert wordwrap(text, 12, cut=True).replace("\n", " ") == text


# ---------------------------------------------------------------------------
# Row formatting
# ---------------------------------------------------------------------------

class TestFormatRow:
    def test_default_layout_is_one_fluid_column(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 10)
        assert layout.column_widths == [10]
        assert layout.format_row(["hi"]) == "hi        "

    def test_alignment_and_padding(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 21).set_column_widths([10, "*"])
        row = layout.format_row(["left", "right"], column_aligns=["left", "right"])
        assert row == "left".ljust(10) + " " + "right".rjust(10)

    def test_default_aligns_used(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 21).set_column_widths([10, "*"]).set_column_aligns(["right"])
        assert layout.format_row(["a", "b"]) == "a".rjust(10) + " " + "b".ljust(10)

    def test_wrapped_columns_zip_into_lines(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 12).set_column_widths([5, "*"])
        row = layout.format_row(["aaa bbb", "x"])
        assert row.split("\n") == ["aaa  " + " " + "x     ", "bbb  " + " " + " " * 6]

    def test_missing_text_renders_blank(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 12).set_column_widths([5, "*"])
        assert layout.format_row(["only"]) == "only " + " " + " " * 6

    def test_framing_separator(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 9, "|").set_column_widths([3, "*"])
        assert layout.format_row(["ab", "cd"]) == "|ab |cd |"

    def test_zero_width_column_renders_empty(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 10).set_column_widths([0, "*"])
        assert layout.format_row(["hidden", "shown"]) == " " + "shown".ljust(9)

    def test_per_call_widths_override_defaults(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 9)
        assert layout.format_row(["a", "b"], column_widths=[4, "*"]) == "a   " + " " + "b   "

    def test_non_string_cells(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 7).set_column_widths([3, "*"])
        assert layout.format_row([42, None]) == "42 " + " " + "   "

    def test_no_escapes_without_color(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 10)
        row = layout.format_row(["x"], colors=["red"], column_attrs=[("bold",)])
        assert "\x1b" not in row

    def test_color_applied_per_cell(self, color_stdio: StdIO) -> None:
        layout = TableLayout(color_stdio, 10)
        row = layout.format_row(["x"], colors=["red"])
        assert "\x1b[31m" in row
        assert "x" in row

    def test_attribute_applied_per_cell(self, color_stdio: StdIO) -> None:
        layout = TableLayout(color_stdio, 10).set_column_attrs([("bold",)])
        assert "\x1b[1m" in layout.format_row(["x"])

    def test_invalid_default_widths_rejected_immediately(self, stdio: StdIO) -> None:
        layout = TableLayout(stdio, 10)
        with pytest.raises(ConfigurationError):
            layout.set_column_widths(["*", "*"])
        assert layout.column_specs == ["*"]
