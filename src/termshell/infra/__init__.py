"""Infrastructure layer — terminal streams, line editing and hidden input.

Rules
-----
* No imports from ``cli``.
* No layout or parsing logic; these adapters only move text in and out.
* Satisfies the protocols in :mod:`termshell.core.protocols`.
"""

from termshell.infra.line_editor import (
    PlainTextHistory,
    PromptToolkitLineEditor,
    ShellCompleter,
    StreamLineEditor,
    completion_candidates,
    create_line_editor,
    history_path,
)
from termshell.infra.secure_input import default_strategies, read_secure
from termshell.infra.terminal import StdIO

__all__: list[str] = [
    "PlainTextHistory",
    "PromptToolkitLineEditor",
    "ShellCompleter",
    "StdIO",
    "StreamLineEditor",
    "completion_candidates",
    "create_line_editor",
    "default_strategies",
    "history_path",
    "read_secure",
]
