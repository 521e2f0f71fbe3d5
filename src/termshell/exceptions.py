"""Custom exception hierarchy for termshell.

Every failure the library surfaces to an embedding application is a
subclass of :class:`TermshellError`, so callers can catch one type at
their own error boundary.

Hierarchy
---------
TermshellError
├── ArgumentError
├── ConfigurationError
├── MissingValueError
└── UnsupportedCapabilityError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termshell.core.models import OptionSpec


class TermshellError(Exception):
    """Base exception for all termshell errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Arguments -------------------------------------------------------------

class ArgumentError(TermshellError):
    """Raised when there are no arguments to process."""


class MissingValueError(TermshellError):
    """Raised when a required option is given without an eligible value.

    The rendered help screen travels as the ``hint`` so the caller can
    print it and decide whether to continue or stop.
    """

    def __init__(
        self,
        message: str,
        *,
        option: OptionSpec | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.option: OptionSpec | None = option


# --- Configuration ---------------------------------------------------------

class ConfigurationError(TermshellError):
    """Raised for invalid layouts, command tables or handler references."""


# --- Terminal capabilities -------------------------------------------------

class UnsupportedCapabilityError(TermshellError):
    """Raised when the terminal cannot provide a requested capability."""
