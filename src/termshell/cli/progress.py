"""Progress indicators.

* :class:`ActiveLine` redraws a single terminal line in place through
  the terminal sink: status messages, percentages, a text progress bar
  and a spinner.
* :class:`StepProgress` wraps a Rich :class:`~rich.progress.Progress`
  display for loops with a known number of steps.
"""

from __future__ import annotations

import math

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from termshell.cli.console import get_rich_console
from termshell.core.protocols import TerminalSink

SPINNER_SYMBOLS: tuple[str, ...] = ("   ", ".  ", ".. ", "...")


def percent(current: int, total: int) -> int:
    """``floor(current / total * 100)``; callers guarantee ``total > 0``."""
    return math.floor(current / total * 100)


class ActiveLine:
    """In-place status line for long running loops.

    Usage::

        line = ActiveLine(stdio)
        line.start_progress_bar(len(items), info="copying")
        for done, item in enumerate(items, start=1):
            copy(item)
            line.update_progress_bar(done)
        line.finish_progress_bar("done")
    """

    def __init__(self, sink: TerminalSink) -> None:
        self._sink = sink
        self._message_length = 0

        self._progress_total = 0
        self._progress_message = ""

        self._bar_total = 0
        self._bar_width = 0
        self._bar_info = " "
        self._bar_color: str | None = "green"
        self._bar_solid = True
        self._bar_length = 0

        self._spinner_index = 0

    # ------------------------------------------------------------------
    # Status message
    # ------------------------------------------------------------------

    def set_message(self, message: str, active: bool = True) -> None:
        """Overwrite the line with *message*; ``active=False`` ends the line."""
        if not message:
            return
        text = message.ljust(self._message_length)
        self._message_length = len(message)
        self._sink.overwrite(" " + text)
        if not active:
            self._sink.write("", 1)

    # ------------------------------------------------------------------
    # Percentage
    # ------------------------------------------------------------------

    def start_progress(self, total: int, message: str = "Processing...") -> None:
        self._progress_total = total
        self._progress_message = message
        self.update_progress(0)

    def update_progress(self, current: int, message: str | None = None) -> None:
        if message is not None:
            self._progress_message = message
        if self._progress_total > 0:
            done = percent(current, self._progress_total)
            self._sink.overwrite(f" {self._progress_message} {done}% ")

    def finish_progress(self, message: str | None = None) -> None:
        self.update_progress(self._progress_total, message)
        self._sink.write("", 1)

    # ------------------------------------------------------------------
    # Progress bar
    # ------------------------------------------------------------------

    def start_progress_bar(
        self,
        total: int,
        info: str | None = None,
        max_width: int | None = None,
        solid: bool = True,
        color: str | None = "green",
    ) -> None:
        """Begin a bar sized to the terminal (or *max_width* if smaller)."""
        self._bar_total = total
        if info is not None:
            self._bar_info = info
        self._bar_color = color
        self._bar_solid = solid
        self._bar_width = self._sink.width
        if max_width:
            self._bar_width = min(max_width, self._bar_width)
        self.update_progress_bar(0)

    def render_progress_bar(self, current: int) -> str:
        """Return the bar line for *current* without drawing it.

        Empty until a bar with a positive total has been started.
        """
        if self._bar_total <= 0:
            return ""
        done = percent(current, self._bar_total)
        status = f"{done:>3}%"
        room = max(self._bar_width - (len(status) + len(self._bar_info) + 4), 0)
        filled = min(room, math.ceil(done * room / 100))
        background = self._bar_color if self._bar_solid else None
        bar = (
            "|"
            + self._sink.colorize_text("#" * filled, self._bar_color, background)
            + "_" * (room - filled)
            + "|"
        )
        return f"{status} {bar} {self._bar_info}"

    def update_progress_bar(self, current: int, info: str | None = None) -> None:
        """Redraw the bar, blanking what is left of a longer previous frame."""
        if info is not None:
            self._bar_info = info
        if self._bar_total <= 0:
            return
        # visible length: status (4) + two pipes + two spaces + room + info
        length = max(self._bar_width, 8 + len(self._bar_info))
        padding = " " * max(self._bar_length - length, 0)
        self._bar_length = length
        self._sink.overwrite(self.render_progress_bar(current) + padding)

    def finish_progress_bar(self, info: str | None = None) -> None:
        self.update_progress_bar(self._bar_total, info)
        self._sink.write("", 1)

    # ------------------------------------------------------------------
    # Spinner
    # ------------------------------------------------------------------

    def spinner(self, reset: bool = False) -> str:
        """Return the next spinner frame."""
        if reset:
            self._spinner_index = 0
        symbol = SPINNER_SYMBOLS[self._spinner_index]
        self._spinner_index = (self._spinner_index + 1) % len(SPINNER_SYMBOLS)
        return symbol


class StepProgress:
    """Rich progress display for a fixed number of steps.

    Usage::

        with StepProgress(total=len(files), description="Indexing") as progress:
            for path in files:
                index(path)
                progress.advance()
    """

    def __init__(self, total: int, description: str = "Processing...") -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._total = total
        self._description = description
        self._task_id: TaskID | None = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> StepProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich progress display."""
        if not self._started:
            if self._task_id is None:
                self._task_id = self._progress.add_task(self._description, total=self._total)
            self._progress.start()
            self._started = True

    def stop(self) -> None:
        """Stop the Rich progress display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def advance(self, steps: int = 1) -> None:
        if self._started and self._task_id is not None:
            self._progress.advance(self._task_id, steps)

    def update(self, completed: int | None = None, description: str | None = None) -> None:
        if not self._started or self._task_id is None:
            return
        self._progress.update(self._task_id, completed=completed, description=description)

    @property
    def completed(self) -> float:
        if self._task_id is None:
            return 0
        return self._progress.tasks[self._task_id].completed
