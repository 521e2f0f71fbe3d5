"""Interactive shell: read a line, dispatch it, repeat.

The loop is a small state machine::

    AWAITING_LINE → DISPATCHING → AWAITING_LINE | TERMINATED

``exit`` and end of input terminate; ``list`` prints the commands; any
registered command is parsed into a fresh
:class:`~termshell.core.models.ParsedArguments` and handed to the
application's handler. A handler returning exactly ``False`` ends the
loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from termshell.cli import exit_codes
from termshell.cli.help import render_command_list, render_help
from termshell.config import DEFAULT_PROMPT
from termshell.core.models import ParsedArguments
from termshell.core.protocols import LineEditor
from termshell.core.registry import CommandRegistry, parse_arguments
from termshell.exceptions import ConfigurationError, TermshellError
from termshell.infra.line_editor import completion_candidates, create_line_editor, history_path
from termshell.infra.terminal import StdIO

logger = logging.getLogger(__name__)

LIST_COMMAND = "list"
EXIT_COMMAND = "exit"
STOP = False
"""Handler return value that ends the shell."""

ShellHandler = Callable[["Shell", str, dict[str, "str | None"]], Any]


class ShellState(Enum):
    AWAITING_LINE = "awaiting_line"
    DISPATCHING = "dispatching"
    TERMINATED = "terminated"


@dataclass
class ShellSession:
    """Long-lived state of one shell run."""

    name: str
    commands: CommandRegistry
    history_file: Path

    def completions(self, buffer: str) -> list[str]:
        return completion_candidates(self.commands.commands, buffer)


class Shell:
    """Read-eval loop over a command table.

    Parameters
    ----------
    name:
        Shell name, used in the banner and the history file name.
    commands:
        Command table in the shape :meth:`CommandRegistry.register_commands`
        accepts. ``list`` and ``exit`` are added automatically.
    handler:
        Called as ``handler(shell, command, options)`` for every valid
        command line.
    sink:
        Terminal sink for all output.
    history_dir:
        Existing directory for the ``.history_<name>`` file.
    line_editor:
        Line-editing provider; chosen from the sink when omitted.

    Raises
    ------
    ConfigurationError
        For an empty command table, a non-callable handler or a missing
        history directory.
    """

    def __init__(
        self,
        name: str,
        commands: Mapping[str, Any],
        handler: ShellHandler,
        *,
        sink: StdIO,
        history_dir: str | Path = ".",
        prompt: str = DEFAULT_PROMPT,
        line_editor: LineEditor | None = None,
    ) -> None:
        if not commands or not isinstance(commands, Mapping):
            raise ConfigurationError("Invalid commands provided.")
        if not callable(handler):
            raise ConfigurationError(f"Invalid shell handler provided: {handler!r}")
        if not Path(history_dir).is_dir():
            raise ConfigurationError(f"Given history path does not exist: {history_dir}")

        registry = CommandRegistry().register_commands(commands)
        registry.register(LIST_COMMAND, {"help_note": "Show list of commands."})
        registry.register(EXIT_COMMAND, {"help_note": "Exit the shell."})

        self.session = ShellSession(name, registry, history_path(name, history_dir))
        self.state: ShellState = ShellState.AWAITING_LINE
        self.arguments: ParsedArguments | None = None
        """Parse result of the line being dispatched."""

        self.stdio = sink
        self._handler = handler
        self._prompt = prompt
        self._editor: LineEditor = line_editor or create_line_editor(
            sink, self.session.history_file, registry.commands
        )

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Run until ``exit``, end of input or a handler returns ``False``."""
        self.stdio.writeln(self.banner())
        while self.state is not ShellState.TERMINATED:
            self.handle_line(self._editor.read_line(f"{self._prompt} "))
        return exit_codes.SUCCESS

    def handle_line(self, line: str | None) -> ShellState:
        """Process one line of input and return the resulting state."""
        if line is None:
            self._farewell(2)
            self.state = ShellState.TERMINATED
            return self.state

        tokens = [token.strip() for token in line.split()]
        if not tokens:
            self.state = ShellState.AWAITING_LINE
            return self.state

        self._editor.remember(line)
        self.state = ShellState.DISPATCHING
        self.state = self._dispatch(tokens)
        return self.state

    def _dispatch(self, tokens: list[str]) -> ShellState:
        command = tokens[0]
        registry = self.session.commands
        logger.debug("Dispatching %r in shell %s", command, self.session.name)

        if command == EXIT_COMMAND:
            self._farewell(1)
            return ShellState.TERMINATED

        if command == LIST_COMMAND:
            self.stdio.writeln("Available commands:")
            self.stdio.write(self.command_list(), 2)
            return ShellState.AWAITING_LINE

        if command not in registry:
            self.stdio.writeln([f"No command '{command}' found.", "Available commands are:"])
            self.stdio.write(self.command_list(), 2)
            return ShellState.AWAITING_LINE

        self.arguments = parse_arguments(registry, tokens)
        if self.arguments.help_requested:
            self.stdio.write(self.help(), 2)
            return ShellState.AWAITING_LINE

        if self.arguments.missing:
            option = self.arguments.missing[0]
            self.stdio.set_color("red").write(f"Error! Given option {option.flag} requires a value.", 2)
            self.stdio.write(self.help(), 2)
            return ShellState.AWAITING_LINE

        try:
            result = self._handler(self, command, self.arguments.options())
        except TermshellError as exc:
            self.stdio.set_color("red").writeln(f"Error: {exc}")
            if exc.hint:
                self.stdio.set_color("yellow").writeln(exc.hint)
            return ShellState.AWAITING_LINE

        if result is STOP:
            return ShellState.TERMINATED
        return ShellState.AWAITING_LINE

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def banner(self) -> str:
        c = self.stdio.colorize_text
        return (
            f"\nWelcome to the {self.session.name} shell.\n\n"
            f"At the prompt, type {c(LIST_COMMAND, 'brown')} to get a list of\n"
            "available commands.\n\n"
            f"To exit the shell, type {c('^D', 'brown')} or {c(EXIT_COMMAND, 'brown')}.\n"
        )

    def command_list(self) -> list[str]:
        return render_command_list(self.session.commands, self.stdio)

    def help(self) -> str:
        if self.arguments is None:
            return ""
        return render_help(self.arguments, self.stdio, self.stdio.width)

    def _farewell(self, blank_lines: int) -> None:
        self.stdio.ln(blank_lines).write("Bye", 2)
