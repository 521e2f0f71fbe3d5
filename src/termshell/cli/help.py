"""Help screens and command listings.

Pure text builders: they return strings (with color escapes when the
colorizer has color enabled) and leave writing to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable

from termshell.core.layout import wordwrap
from termshell.core.models import CommandSpec, ParsedArguments
from termshell.core.protocols import Colorizer
from termshell.infra.terminal import TAB


def render_help(
    parsed: ParsedArguments,
    colorizer: Colorizer,
    width: int,
    help_note: str | None = None,
) -> str:
    """Render the help screen for the command selected in *parsed*.

    Lists the given arguments, every registered option with its long
    form, description, required flag and captured value, and the help
    note (word-wrapped to *width*).
    """
    c = colorizer.colorize_text
    lines: list[str] = [
        c("=" * width, "green"),
        c("Help for current command !", "green"),
        c("-" * width, "green"),
    ]

    if parsed.arguments:
        lines.append(c("Given arguments: ", "purple") + ", ".join(parsed.arguments))
    else:
        lines.append(c("No arguments given !", "red"))
    lines.append("")

    options = list(parsed.spec.options.values()) if parsed.spec is not None else []
    if options:
        lines.append(c("Registered options:", "purple"))
        for number, option in enumerate(options, start=1):
            required = c("Yes", "green") if option.required else c("No", "red")
            lines.extend(
                [
                    "",
                    f"{number}){TAB}{c('Option: ', 'light_blue')}{TAB}{option.flag}",
                    f"{TAB}{c('Long Option: ', 'light_blue')}{TAB}{option.long_flag or ''}",
                    f"{TAB}{c('Description: ', 'light_blue')}{TAB}{option.description or ''}",
                    f"{TAB}{c('Required: ', 'light_blue')}{TAB}{required}",
                    f"{TAB}{c('Given Value: ', 'light_blue')}{TAB}{parsed.values.get(option.short) or ''}",
                ]
            )
    else:
        lines.append(c("No options registered !", "red"))

    note = help_note if help_note is not None else parsed.help_note
    if note:
        lines.extend(
            [
                "",
                c("-" * width, "yellow"),
                wordwrap(note, width, cut=True),
                c("-" * width, "yellow"),
            ]
        )
    lines.append(c("=" * width, "green"))
    return "\n".join(lines)


def render_command_list(commands: Iterable[CommandSpec], colorizer: Colorizer) -> list[str]:
    """One `` name<TAB>help note`` line per command."""
    return [
        f" {colorizer.colorize_text(spec.name, 'green')}{TAB}{spec.help_note or ''}"
        for spec in commands
    ]
