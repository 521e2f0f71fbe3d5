"""Domain models for termshell.

Option and command declarations are **frozen** dataclasses: once a
registry holds them they never change. Updating a command means
building a new :class:`CommandSpec` through :meth:`CommandSpec.with_option`.
:class:`ParsedArguments` is rebuilt for every parse and only answers
queries afterwards.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

FLAG_PATTERN = re.compile(r"^(-|--)")
"""A token matching this pattern is never captured as a value."""


def is_flag_shaped(token: str) -> bool:
    """Return ``True`` when *token* starts with ``-`` or ``--``."""
    return FLAG_PATTERN.match(token) is not None


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionSpec:
    """One declared option of a command."""

    short: str
    """Single canonical letter, without the leading dash."""

    long: str | None = None
    """Long name without the leading dashes, or ``None``."""

    description: str | None = None

    required: bool = False
    """When ``True`` a present flag must be followed by a value."""

    @property
    def flag(self) -> str:
        """Short flag token, e.g. ``-f``."""
        return f"-{self.short}"

    @property
    def long_flag(self) -> str | None:
        """Long flag token, e.g. ``--foo``, or ``None``."""
        return f"--{self.long}" if self.long else None

    def matches(self, name: str) -> bool:
        """Return ``True`` if *name* is this option's short or long name."""
        return f"-{name}" == self.flag or f"--{name}" == self.long_flag


HELP_OPTION = OptionSpec("h", "help", "Show help for current command.")
"""Implicit option added to every registered command."""


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """A named command and its options, keyed by short letter."""

    name: str
    options: Mapping[str, OptionSpec] = field(default_factory=dict)
    help_note: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def with_option(self, option: OptionSpec) -> CommandSpec:
        """Return a copy with *option* added; same short letter replaces."""
        options = dict(self.options)
        options[option.short] = option
        return replace(self, options=options)

    def with_help_note(self, help_note: str | None) -> CommandSpec:
        return replace(self, help_note=help_note)

    def find(self, name: str) -> OptionSpec | None:
        """Look up an option by short or long name."""
        for option in self.options.values():
            if option.matches(name):
                return option
        return None

    @property
    def long_names(self) -> tuple[str, ...]:
        return tuple(opt.long for opt in self.options.values() if opt.long)


# ---------------------------------------------------------------------------
# Parse result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedArguments:
    """Result of matching one argument vector against a registry.

    Attributes
    ----------
    command : str | None
        Selected command name (the first token), or ``None`` when the
        process was started without any arguments.
    arguments : tuple[str, ...]
        Tokens following the command name.
    spec : CommandSpec | None
        Declaration of the selected command, ``None`` if unregistered.
    values : Mapping[str, str | None]
        Short letter → captured value, for every registered option that
        literally appears in *arguments*. ``None`` means the flag was
        present without an eligible value.
    missing : tuple[OptionSpec, ...]
        Required options present without an eligible value.
    """

    command: str | None
    arguments: tuple[str, ...] = ()
    spec: CommandSpec | None = None
    values: Mapping[str, str | None] = field(default_factory=dict)
    missing: tuple[OptionSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    # ------------------------------------------------------------------
    # Positional access
    # ------------------------------------------------------------------

    def get(self, index: int | None = None, default: str | None = None) -> str | tuple[str, ...] | None:
        """Return the token at *index*, or all tokens when *index* is ``None``."""
        if index is None:
            return self.arguments
        if 0 <= index < len(self.arguments):
            return self.arguments[index]
        return default

    # ------------------------------------------------------------------
    # Option queries
    # ------------------------------------------------------------------

    def has_option(self, name: str, pos: int | None = None) -> bool:
        """Return ``True`` if ``-name`` or ``--name`` appears in the tokens.

        Registration is not consulted. With *pos*, only the token at
        that index is checked.
        """
        spellings = (f"-{name}", f"--{name}")
        if pos is None:
            return any(token in spellings for token in self.arguments)
        return 0 <= pos < len(self.arguments) and self.arguments[pos] in spellings

    def is_valid_option(self, name: str) -> bool:
        """Return ``True`` if *name* is registered for the selected command."""
        return self.option(name) is not None

    def is_option(self, name: str, pos: int | None = None) -> bool:
        """Registered for the selected command and present in the tokens."""
        return self.is_valid_option(name) and self.has_option(name, pos)

    def is_given(self, name: str) -> bool:
        """Registered option *name* appears under either of its spellings."""
        option = self.option(name)
        return option is not None and option.short in self.values

    def option(self, name: str) -> OptionSpec | None:
        if self.spec is None:
            return None
        return self.spec.find(name)

    def get_option_value(self, name: str, default: str | None = None) -> str | None:
        """Captured value for option *name*, or *default*."""
        option = self.option(name)
        if option is None:
            return default
        value = self.values.get(option.short)
        return default if value is None else value

    def options(self) -> dict[str, str | None]:
        """Short letter → value for every registered option that is present."""
        return dict(self.values)

    @property
    def help_requested(self) -> bool:
        return self.has_option("h") or self.has_option("help")

    @property
    def help_note(self) -> str | None:
        return self.spec.help_note if self.spec is not None else None
