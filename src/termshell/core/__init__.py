"""Core layer — declarations, argument matching and text layout.

Rules
-----
* No ``print()`` calls and no terminal or filesystem I/O.
* No imports from ``cli`` or ``infra``.
* Collaborators are reached only through :mod:`termshell.core.protocols`.
"""

from termshell.core.layout import TableLayout, resolve_widths, wordwrap
from termshell.core.models import CommandSpec, OptionSpec, ParsedArguments
from termshell.core.protocols import Colorizer, LineEditor, SecureInputStrategy, TerminalSink
from termshell.core.registry import CommandRegistry, parse_arguments
from termshell.core.table import Table

__all__: list[str] = [
    "Colorizer",
    "CommandRegistry",
    "CommandSpec",
    "LineEditor",
    "OptionSpec",
    "ParsedArguments",
    "SecureInputStrategy",
    "Table",
    "TableLayout",
    "TerminalSink",
    "parse_arguments",
    "resolve_widths",
    "wordwrap",
]
