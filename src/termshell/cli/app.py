"""Demo console script and error boundary for termshell.

``termshell`` exercises the library end to end: it parses its own
arguments with :class:`~termshell.cli.toolkit.Cli`, renders tables,
draws progress, asks for hidden input and runs an interactive shell.

Architecture notes
------------------
* :func:`main` returns an exit code and never calls ``sys.exit``.
* :func:`cli` is the only place that translates errors into process
  exit codes.
"""

from __future__ import annotations

import sys
import time
from typing import Any

from rich.text import Text

from termshell.cli import exit_codes
from termshell.cli.console import console
from termshell.cli.progress import StepProgress
from termshell.cli.shell import STOP, Shell
from termshell.cli.toolkit import Cli
from termshell.config import configure_logging, load_settings
from termshell.exceptions import ArgumentError, TermshellError
from termshell.version import __version__

PROGRAM = "termshell"

DEMO_COMMANDS: dict[str, Any] = {
    "table": {
        "options": [
            ("w", "width", "Table width in columns."),
            ("c", "color", "Header color name."),
        ],
        "help_note": "Render the command table as a bordered table.",
    },
    "progress": {
        "options": [
            ("s", "steps", "Number of steps.", True),
            ("d", "delay", "Seconds to wait between steps."),
            ("r", "rich", "Use the rich progress display."),
        ],
        "help_note": "Draw a progress bar.",
    },
    "secret": {
        "options": [("p", "prompt", "Prompt message.")],
        "help_note": "Read a line without echoing it.",
    },
    "shell": {
        "options": [
            ("n", "name", "Shell name."),
            ("d", "history-dir", "Directory holding the history file."),
        ],
        "help_note": "Start an interactive demo shell.",
    },
}

SHELL_COMMANDS: dict[str, Any] = {
    "echo": {
        "options": [("t", "text", "Text to print."), ("c", "color", "Color name.")],
        "help_note": "Print text.",
    },
    "options": {
        "options": [("a", "alpha", "First value."), ("b", "beta", "Second value.")],
        "help_note": "Show the captured option values.",
    },
    "stop": {"help_note": "Leave the shell from the handler."},
}


# ---------------------------------------------------------------------------
# Option helpers
# ---------------------------------------------------------------------------

def _int_option(cli: Cli, name: str, default: int) -> int:
    raw = cli.get_option_value(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ArgumentError(
            f"Option --{name} expects a whole number, got {raw!r}.",
        ) from None


def _float_option(cli: Cli, name: str, default: float) -> float:
    raw = cli.get_option_value(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ArgumentError(f"Option --{name} expects a number, got {raw!r}.") from None


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def _handle_table(cli: Cli) -> int:
    width = _int_option(cli, "width", cli.stdio.width)
    color = cli.get_option_value("color")
    table = cli.table(width)
    table.set_header(
        ["Command", "Options", "Description"],
        [10, "35%", "*"],
        colors=[color] * 3,
    )
    for spec in cli.registry:
        flags = ", ".join(
            f"{option.flag}/{option.long_flag}" if option.long_flag else option.flag
            for option in spec.options.values()
        )
        table.add_row([spec.name, flags, spec.help_note or ""])
    cli.stdio.write(table.render())
    return exit_codes.SUCCESS


def _handle_progress(cli: Cli) -> int:
    steps = _int_option(cli, "steps", 10)
    delay = _float_option(cli, "delay", 0.05)

    if cli.is_given("rich"):
        with StepProgress(total=steps, description="Working") as progress:
            for _ in range(steps):
                time.sleep(delay)
                progress.advance()
        return exit_codes.SUCCESS

    line = cli.active_line()
    line.start_progress_bar(steps, info="working", max_width=60)
    for step in range(1, steps + 1):
        time.sleep(delay)
        line.update_progress_bar(step)
    line.finish_progress_bar("done")
    return exit_codes.SUCCESS


def _handle_secret(cli: Cli) -> int:
    prompt = cli.get_option_value("prompt", "Password")
    value = cli.prompt_input(prompt or "Password", secure=True) or ""
    console.print(f"[green]Read {len(value)} characters.[/green]")
    return exit_codes.SUCCESS


def _shell_handler(shell: Shell, command: str, options: dict[str, str | None]) -> Any:
    if command == "stop":
        return STOP
    if command == "echo":
        shell.stdio.set_color(options.get("c")).writeln(options.get("t") or "")
        return None
    for short, value in sorted(options.items()):
        shell.stdio.writeln(f"-{short}: {value if value is not None else '(no value)'}")
    return None


def _handle_shell(cli: Cli) -> int:
    name = cli.get_option_value("name", PROGRAM) or PROGRAM
    return cli.prompt_shell(
        name,
        SHELL_COMMANDS,
        _shell_handler,
        history_dir=cli.get_option_value("history-dir"),
    )


_HANDLERS = {
    "table": _handle_table,
    "progress": _handle_progress,
    "secret": _handle_secret,
    "shell": _handle_shell,
}


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the termshell demo CLI.

    Parameters
    ----------
    argv:
        Explicit argument list without the program name.  When ``None``
        (default), ``sys.argv[1:]`` is used.

    Returns
    -------
    int
        OS process exit code.
    """
    args = sys.argv[1:] if argv is None else argv
    tool = Cli([PROGRAM, *args], DEMO_COMMANDS, help_note=f"{PROGRAM} {__version__} demo.")

    if tool.command in ("--version", "-V"):
        console.print(f"{PROGRAM} {__version__}")
        return exit_codes.SUCCESS

    if tool.command is None or tool.command in ("-h", "--help"):
        tool.show_commands()
        return exit_codes.SUCCESS

    handler = _HANDLERS.get(tool.command)
    if handler is None:
        raise ArgumentError(
            f"No command '{tool.command}' found.",
            hint="Available commands: " + ", ".join(_HANDLERS),
        )

    if tool.help_requested:
        tool.show_help()
        return exit_codes.SUCCESS

    tool.check_required()
    return handler(tool)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    configure_logging(load_settings())
    try:
        code = main()
        sys.exit(code)
    except TermshellError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(Text.from_ansi(exc.hint))
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
