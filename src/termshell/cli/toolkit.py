"""The :class:`Cli` facade: one object wiring arguments, output and prompts.

Typical command-line tool::

    cli = Cli(sys.argv, options=[("o", "output", "Target file.", True)],
              help_note="Converts things.")
    if cli.help_requested:
        cli.show_help()
        cli.stop()
    cli.check_required()
    target = cli.get_option_value("o", "out.txt")

Tools with sub-commands pass ``commands=`` instead; the first argument
then selects the command.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, NoReturn

from termshell.cli.help import render_command_list, render_help
from termshell.cli.progress import ActiveLine
from termshell.cli.shell import Shell, ShellHandler
from termshell.config import DEFAULT_PROMPT, Settings, load_settings
from termshell.core.layout import TableLayout
from termshell.core.models import ParsedArguments
from termshell.core.protocols import LineEditor, SecureInputStrategy
from termshell.core.registry import CommandRegistry, parse_arguments
from termshell.core.table import Table
from termshell.exceptions import ArgumentError, ConfigurationError, MissingValueError
from termshell.infra.secure_input import default_strategies, read_secure
from termshell.infra.terminal import StdIO

ROOT_COMMAND = "__root__"
"""Command name the top-level options are registered under."""


class Cli:
    """Command-line tool built from a process argument vector.

    Parameters
    ----------
    argv:
        Full argument vector; ``argv[0]`` (the program) is discarded.
        Defaults to ``sys.argv``.
    commands:
        Sub-command table, as accepted by
        :meth:`CommandRegistry.register_commands`.
    options:
        Option declarations for a tool without sub-commands.
    help_note:
        Free text appended to the help screen.

    Raises
    ------
    ArgumentError
        If *argv* is empty.
    """

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        commands: Mapping[str, Any] | None = None,
        *,
        options: Sequence[Any] | None = None,
        help_note: str | None = None,
        sink: StdIO | None = None,
        settings: Settings | None = None,
    ) -> None:
        argv = list(sys.argv if argv is None else argv)
        if not argv:
            raise ArgumentError("Could not process arguments.")

        self.settings: Settings = settings or load_settings()
        self.stdio: StdIO = sink or StdIO(settings=self.settings)
        self.help_note = help_note
        self.registry = CommandRegistry().register_commands(commands)

        tokens = argv[1:]
        self._root = options is not None
        if self._root:
            self.registry.register(ROOT_COMMAND, {"options": list(options or ()), "help_note": help_note})
            self.args = parse_arguments(self.registry, [ROOT_COMMAND, *tokens])
        elif tokens:
            self.args = parse_arguments(self.registry, tokens)
        else:
            self.args = ParsedArguments(command=None)

    # ------------------------------------------------------------------
    # Argument queries
    # ------------------------------------------------------------------

    @property
    def command(self) -> str | None:
        """Selected sub-command, ``None`` for tools without sub-commands."""
        return None if self._root else self.args.command

    def get(self, index: int | None = None, default: str | None = None) -> Any:
        return self.args.get(index, default)

    def has_option(self, name: str, pos: int | None = None) -> bool:
        return self.args.has_option(name, pos)

    def is_valid_option(self, name: str) -> bool:
        return self.args.is_valid_option(name)

    def is_option(self, name: str, pos: int | None = None) -> bool:
        return self.args.is_option(name, pos)

    def is_given(self, name: str) -> bool:
        return self.args.is_given(name)

    def get_option_value(self, name: str, default: str | None = None) -> str | None:
        return self.args.get_option_value(name, default)

    def options(self) -> dict[str, str | None]:
        return self.args.options()

    @property
    def help_requested(self) -> bool:
        return self.args.help_requested

    def check_required(self) -> None:
        """Raise :class:`MissingValueError` for a required option without value."""
        if not self.args.missing:
            return
        option = self.args.missing[0]
        given = option.flag if option.flag in self.args.arguments else option.long_flag
        raise MissingValueError(
            f"Given option {given} requires a value.",
            option=option,
            hint=self.render_help(),
        )

    def bind_option(self, name: str, callback: Callable[..., Any], *params: Any) -> None:
        """Call *callback* when option *name* is registered and given.

        The callback receives this ``Cli`` followed by *params*, or by
        the option's value when no *params* are passed.
        """
        option = self.args.option(name)
        if option is None or not self.is_given(option.short):
            return
        if not callable(callback):
            raise ConfigurationError(f"Not a valid callback for option {option.flag!r}")
        args = params if params else (self.args.values.get(option.short),)
        callback(self, *args)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render_help(self) -> str:
        note = self.args.help_note or self.help_note
        return render_help(self.args, self.stdio, self.stdio.width, note)

    def show_help(self) -> None:
        self.stdio.writeln(self.render_help())

    def show_commands(self) -> None:
        commands = [spec for spec in self.registry if spec.name != ROOT_COMMAND]
        self.stdio.writeln("Available commands:")
        self.stdio.write(render_command_list(commands, self.stdio), 2)

    def table(self, width: int | None = None) -> Table:
        return Table(self.stdio, width or self.stdio.width)

    def layout(self, width: int | None = None, separator: str = " ") -> TableLayout:
        return TableLayout(self.stdio, width or self.stdio.width, separator)

    def active_line(self) -> ActiveLine:
        return ActiveLine(self.stdio)

    def clear(self) -> None:
        self.stdio.clear()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def prompt_input(
        self,
        message: str,
        secure: bool = False,
        strategies: Sequence[SecureInputStrategy] | None = None,
    ) -> str | None:
        """Ask for one line of input; ``secure`` hides what is typed.

        Raises
        ------
        UnsupportedCapabilityError
            If *secure* and no hidden-input strategy works here.
        """
        if not message:
            return None
        prompt = f"{message}: "
        if secure:
            chain = strategies if strategies is not None else default_strategies(self.stdio)
            return read_secure(prompt, chain)
        return (self.stdio.read(prompt) or "").strip()

    def prompt_shell(
        self,
        name: str,
        commands: Mapping[str, Any],
        handler: ShellHandler,
        *,
        history_dir: str | Path | None = None,
        prompt: str = DEFAULT_PROMPT,
        line_editor: LineEditor | None = None,
    ) -> int:
        """Run an interactive :class:`Shell` and return its exit code."""
        shell = Shell(
            name,
            commands,
            handler,
            sink=self.stdio,
            history_dir=history_dir if history_dir is not None else self.settings.history_dir,
            prompt=prompt,
            line_editor=line_editor,
        )
        return shell.run()

    # ------------------------------------------------------------------
    # Process control
    # ------------------------------------------------------------------

    @staticmethod
    def stop(status: int = 0) -> NoReturn:
        """Terminate the process with *status*."""
        raise SystemExit(status)
