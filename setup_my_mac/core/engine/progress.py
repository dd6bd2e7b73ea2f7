"""
Progress display — one spinner row per step, log lines above it.

Built on ``rich.progress``.  The runner opens a ``RunProgress`` for
the whole run and asks it for a ``StepProgress`` handle per step; steps
only ever see the handle (through their context).

``StepProgress.println`` may be called from the stream reader threads;
rich serialises console writes internally.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn
from rich.text import Text


class LineSink(Protocol):
    """Anything that can print a line of step output."""

    def println(self, line: Text | str) -> None: ...


class StepProgress:
    """Handle for the row belonging to a single step."""

    def __init__(self, progress: Progress, task_id: TaskID, name: str) -> None:
        self._progress = progress
        self._task_id = task_id
        self.name = name

    def set_message(self, message: str) -> None:
        """Replace the text next to the spinner."""
        self._progress.update(self._task_id, description=escape(message))

    def println(self, line: Text | str) -> None:
        """Print a line above the live rows."""
        if isinstance(line, str):
            line = Text(line)
        self._progress.console.print(line, highlight=False)

    def finish_ok(self) -> None:
        self._finish(f"[bold green]✔[/] [bold]{escape(self.name)}[/]")

    def finish_failed(self) -> None:
        self._finish(f"[bold red]✖[/] [bold]{escape(self.name)}[/]")

    def _finish(self, description: str) -> None:
        self._progress.update(self._task_id, description=description, completed=1)


class RunProgress:
    """Live display for a whole run.

    Use as a context manager; rows stay on screen after it exits.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._progress = Progress(
            SpinnerColumn(spinner_name="dots", style="green", finished_text=" "),
            TextColumn("{task.description}"),
            console=self.console,
        )

    def __enter__(self) -> RunProgress:
        self._progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._progress.stop()

    def add_step(self, name: str) -> StepProgress:
        task_id = self._progress.add_task(
            f"[cyan]›[/] [bold]{escape(name)}[/]",
            total=1,
        )
        return StepProgress(self._progress, task_id, name)

    @contextmanager
    def suspended(self) -> Iterator[None]:
        """Stop redrawing so an interactive prompt owns the terminal."""
        self._progress.stop()
        try:
            yield
        finally:
            self._progress.start()
