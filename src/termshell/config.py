"""Runtime settings resolved from the process environment.

Settings are read once into an immutable :class:`Settings` value and
passed explicitly to the objects that need them; nothing below this
module reads ``os.environ`` on its own.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_WIDTH: int = 75
"""Terminal width assumed when none can be detected."""

DEFAULT_PROMPT: str = ">"
"""Prompt shown by the interactive shell."""

HISTORY_FILE_PREFIX: str = ".history_"
"""History files are named ``.history_<shell-name>``."""

_FALSY = frozenset(("0", "false", "no", "off"))
_TRUTHY = frozenset(("1", "true", "yes", "on"))


@dataclass(frozen=True, slots=True)
class Settings:
    """Environment-derived configuration for terminal output and shells."""

    width: int | None = None
    """Explicit terminal width, or ``None`` to detect it."""

    color: bool | None = None
    """Force color on/off, or ``None`` to auto-detect."""

    history_dir: Path = Path(".")
    """Directory in which shell history files are kept."""

    debug: bool = False
    """Enable debug logging on stderr."""


def _parse_width(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        width = int(raw.strip())
    except ValueError:
        return None
    return width if width > 0 else None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``).

    Recognised variables: ``TERMSHELL_COLUMNS`` / ``COLUMNS``,
    ``NO_COLOR``, ``TERMSHELL_COLOR``, ``TERMSHELL_HISTORY_DIR`` and
    ``TERMSHELL_DEBUG``. Malformed values are ignored.
    """
    env = os.environ if environ is None else environ

    width = _parse_width(env.get("TERMSHELL_COLUMNS"))
    if width is None:
        width = _parse_width(env.get("COLUMNS"))

    color: bool | None = None
    if "NO_COLOR" in env:
        color = False
    else:
        raw_color = env.get("TERMSHELL_COLOR", "").strip().lower()
        if raw_color in _FALSY:
            color = False
        elif raw_color in _TRUTHY:
            color = True

    history_dir = Path(env.get("TERMSHELL_HISTORY_DIR") or ".")
    debug = env.get("TERMSHELL_DEBUG", "").strip().lower() in _TRUTHY

    return Settings(width=width, color=color, history_dir=history_dir, debug=debug)


def configure_logging(settings: Settings) -> None:
    """Install a stderr logging handler matching *settings*."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
