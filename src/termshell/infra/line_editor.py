"""Infrastructure: line editing, history and tab completion for shells.

Interactive terminals get a prompt_toolkit :class:`PromptSession`;
piped input falls back to reading through the terminal sink. Both keep
history in a plain text file, one command line per row, appended as
lines are accepted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import History

from termshell.config import HISTORY_FILE_PREFIX
from termshell.core.models import CommandSpec
from termshell.infra.terminal import StdIO

logger = logging.getLogger(__name__)


def history_path(shell_name: str, directory: str | Path = ".") -> Path:
    """Return ``<directory>/.history_<shell_name>``."""
    return Path(directory) / f"{HISTORY_FILE_PREFIX}{shell_name}"


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class PlainTextHistory(History):
    """History stored as newline-delimited text, appended on every entry.

    With ``persist=False`` new entries stay in memory only; the file is
    still read for recall.
    """

    def __init__(self, path: str | Path, persist: bool = True) -> None:
        self.path = Path(path)
        self.persist = persist
        super().__init__()

    def load_history_strings(self) -> Iterable[str]:
        if not self.path.exists():
            return []
        lines = [line for line in self.path.read_text(encoding="utf-8").splitlines() if line]
        logger.debug("Loaded %d history entries from %s", len(lines), self.path)
        # prompt_toolkit expects the most recent entry first
        return list(reversed(lines))

    def store_string(self, string: str) -> None:
        if not self.persist:
            return
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(string.replace("\n", " ") + "\n")


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------

def completion_candidates(commands: Mapping[str, CommandSpec], buffer: str) -> list[str]:
    """Candidates for *buffer*.

    Before the first space: every command name. After it: ``--help``
    and the long options of the command typed so far.
    """
    if " " not in buffer:
        return list(commands)

    name = buffer.split(" ", 1)[0].strip()
    candidates = ["--help"]
    spec = commands.get(name)
    if spec is not None:
        candidates.extend(f"--{long}" for long in spec.long_names if f"--{long}" not in candidates)
    return candidates


class ShellCompleter(Completer):
    """prompt_toolkit completer over a command table."""

    def __init__(self, commands: Mapping[str, CommandSpec]) -> None:
        self._commands = commands

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterator[Completion]:
        word = document.get_word_before_cursor(WORD=True)
        for candidate in completion_candidates(self._commands, document.text_before_cursor):
            if candidate.startswith(word):
                yield Completion(candidate, start_position=-len(word))


# ---------------------------------------------------------------------------
# Editors
# ---------------------------------------------------------------------------

class PromptToolkitLineEditor:
    """Line editor for interactive terminals.

    The session only recalls history; the file is written by
    :meth:`remember` so every accepted line lands there, repeats
    included.
    """

    def __init__(
        self,
        history_file: str | Path,
        completer: Completer | None = None,
        session: PromptSession | None = None,
    ) -> None:
        self.history = PlainTextHistory(history_file)
        self._session: PromptSession = session or PromptSession(
            history=PlainTextHistory(history_file, persist=False),
            completer=completer,
            complete_while_typing=False,
        )

    def read_line(self, prompt: str) -> str | None:
        try:
            return self._session.prompt(prompt)
        except EOFError:
            return None
        except KeyboardInterrupt:
            return ""

    def remember(self, line: str) -> None:
        self.history.append_string(line)


class StreamLineEditor:
    """Line editor for piped input; reads through the terminal sink."""

    def __init__(self, sink: StdIO, history_file: str | Path) -> None:
        self._sink = sink
        self.history = PlainTextHistory(history_file)

    def read_line(self, prompt: str) -> str | None:
        return self._sink.read(prompt)

    def remember(self, line: str) -> None:
        self.history.append_string(line)


def create_line_editor(
    sink: StdIO,
    history_file: str | Path,
    commands: Mapping[str, CommandSpec],
) -> PromptToolkitLineEditor | StreamLineEditor:
    """Pick the editor matching the sink's input stream."""
    if sink.is_interactive:
        return PromptToolkitLineEditor(history_file, ShellCompleter(commands))
    return StreamLineEditor(sink, history_file)
