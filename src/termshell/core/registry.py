"""Command/option registry and the argument matcher.

The registry is a builder: :meth:`CommandRegistry.register_commands`
validates declarations up front and stores immutable
:class:`~termshell.core.models.CommandSpec` values.
:func:`parse_arguments` is a factory that matches one token sequence
against the registry and returns a fresh
:class:`~termshell.core.models.ParsedArguments`; nothing is shared
between two parses.

Leniency
--------
Bulk registration skips malformed declarations instead of raising, so
a partially valid command table still loads. Skips are logged at DEBUG
level.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from termshell.core.models import (
    HELP_OPTION,
    CommandSpec,
    OptionSpec,
    ParsedArguments,
    is_flag_shaped,
)
from termshell.exceptions import ArgumentError

logger = logging.getLogger(__name__)


def _text(value: Any) -> str | None:
    """Stringify a declaration field, treating empty values as absent."""
    if value is None or value == "" or value is False:
        return None
    return str(value)


def build_option(declaration: Any) -> OptionSpec | None:
    """Turn one ``(short, long, description, required)`` tuple into an option.

    Only the short letter is mandatory; it is reduced to its first
    character. Returns ``None`` for anything that cannot be read as a
    declaration.
    """
    if isinstance(declaration, (str, bytes)) or not isinstance(declaration, Sequence):
        return None
    if not declaration or len(declaration) > 4:
        return None

    short = _text(declaration[0])
    if short is None:
        return None

    fields = list(declaration[1:]) + [None] * (4 - len(declaration))
    long_name, description, required = fields
    return OptionSpec(
        short=short[0],
        long=_text(long_name),
        description=_text(description),
        required=bool(required),
    )


class CommandRegistry:
    """Holds the declared commands, keyed by name.

    Usage::

        registry = CommandRegistry().register_commands({
            "build": [("o", "output", "Target directory.", True)],
            "clean": {"options": [("f", "force")], "help_note": "Remove artefacts."},
        })
    """

    def __init__(self, commands: Mapping[str, CommandSpec] | None = None) -> None:
        self._commands: dict[str, CommandSpec] = dict(commands or {})

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_commands(self, commands: Mapping[str, Any] | None) -> CommandRegistry:
        """Register every entry of *commands* and return ``self``.

        Each value is either a list of option declarations or a mapping
        with ``"options"`` and ``"help_note"`` keys. Every command gets
        the implicit ``-h/--help`` option. Entries with an empty name
        are ignored.
        """
        if not commands or not isinstance(commands, Mapping):
            return self

        for name, info in commands.items():
            self.register(name, info)
        return self

    def register(self, name: Any, info: Any = None) -> CommandSpec | None:
        """Register one command; returns its spec or ``None`` if skipped."""
        if not name or not isinstance(name, str):
            logger.debug("Skipping command with empty or non-string name: %r", name)
            return None

        declarations: Iterable[Any] = ()
        help_note: str | None = None
        if isinstance(info, Mapping):
            raw_options = info.get("options")
            if isinstance(raw_options, (list, tuple)):
                declarations = raw_options
            help_note = _text(info.get("help_note", info.get("helpNote")))
        elif isinstance(info, (list, tuple)):
            declarations = info

        spec = CommandSpec(name=name, help_note=help_note)
        for declaration in declarations:
            option = build_option(declaration)
            if option is None:
                logger.debug("Skipping malformed option %r for command %r", declaration, name)
                continue
            spec = spec.with_option(option)

        spec = spec.with_option(HELP_OPTION)
        self._commands[name] = spec
        return spec

    def add(self, spec: CommandSpec) -> CommandRegistry:
        """Store an already built spec, adding the implicit help option."""
        if spec.name:
            self._commands[spec.name] = spec.with_option(HELP_OPTION)
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> CommandSpec | None:
        return self._commands.get(name)

    def names(self) -> list[str]:
        return list(self._commands)

    @property
    def commands(self) -> Mapping[str, CommandSpec]:
        return dict(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def _locate(option: OptionSpec, arguments: Sequence[str]) -> int | None:
    """Index of the short flag, else of the long flag, else ``None``."""
    for token in (option.flag, option.long_flag):
        if token is not None and token in arguments:
            return arguments.index(token)
    return None


def parse_arguments(registry: CommandRegistry, tokens: Sequence[str]) -> ParsedArguments:
    """Match *tokens* (command name first) against *registry*.

    A flag captures the token right after it, unless that token is
    itself flag-shaped or the flag is the last token. Required options
    without a value are listed in ``ParsedArguments.missing``; the
    caller decides what to do about them.

    Raises
    ------
    ArgumentError
        If *tokens* is empty.
    """
    if not tokens:
        raise ArgumentError("Could not process arguments.")

    command = tokens[0]
    arguments = tuple(tokens[1:])
    spec = registry.get(command)
    if spec is None:
        return ParsedArguments(command=command, arguments=arguments)

    values: dict[str, str | None] = {}
    missing: list[OptionSpec] = []
    for short, option in spec.options.items():
        index = _locate(option, arguments)
        if index is None:
            continue
        value_index = index + 1
        value: str | None = None
        if value_index < len(arguments) and not is_flag_shaped(arguments[value_index]):
            value = arguments[value_index]
        elif option.required:
            missing.append(option)
        values[short] = value

    return ParsedArguments(
        command=command,
        arguments=arguments,
        spec=spec,
        values=values,
        missing=tuple(missing),
    )
