"""
Runner — sequences the steps of a bootstrap run.

Flow:
    resolve step list → confirm with the user → for each step:
    build context → run → mark ✔ / ✖

Steps run strictly one after another on the calling thread. The first
failure marks its row failed and ends the run; later steps never start
and earlier ones are not rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal

import click
from rich.console import Console

from setup_my_mac.core.config.loader import ConfigBundle
from setup_my_mac.core.engine.context import StepContext
from setup_my_mac.core.engine.progress import RunProgress, StepProgress
from setup_my_mac.core.engine.registry import (
    STEP_RUNNERS,
    StepKind,
    StepRunner,
    default_steps,
    resolve_steps,
)
from setup_my_mac.core.engine.sudo import SudoSession
from setup_my_mac.core.errors import SetupError, StepError

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def confirm_with_click(prompt: str) -> bool:
    return click.confirm(prompt, default=True)


@dataclass
class RunReport:
    """What a run did. Failed runs raise instead of returning one."""

    steps: list[StepKind] = field(default_factory=list)
    completed: list[StepKind] = field(default_factory=list)
    declined: bool = False

    @property
    def status(self) -> Literal["ok", "declined", "empty"]:
        if self.declined:
            return "declined"
        if not self.steps:
            return "empty"
        return "ok"


class Runner:
    """Drives one run over a loaded configuration.

    Args:
        bundle: Loaded configuration and its root directory.
        console: Where progress is drawn (default: stdout).
        sudo: Sudo session shared by every step of the run.
        runners: Step implementations (default: ``STEP_RUNNERS``).
        confirm: Asks the user a yes/no question.
    """

    def __init__(
        self,
        bundle: ConfigBundle,
        *,
        console: Console | None = None,
        sudo: SudoSession | None = None,
        runners: Mapping[StepKind, StepRunner] | None = None,
        confirm: Confirm = confirm_with_click,
    ) -> None:
        self.config = bundle.config
        self.root = bundle.root
        self.console = console or Console()
        self.sudo = sudo or SudoSession()
        self._runners = runners if runners is not None else STEP_RUNNERS
        self._confirm = confirm

    def default_steps(self) -> list[StepKind]:
        return default_steps(self.config)

    def run(self, requested: Sequence[StepKind] | None = None) -> RunReport:
        """Run the requested steps, or the defaults if none were given.

        Raises:
            StepError: A step failed; the remaining steps were not run.
        """
        steps = resolve_steps(self.config, requested)
        report = RunReport(steps=steps)

        if not steps:
            self.console.print("[yellow]↷[/] No steps to run")
            return report

        if not self.confirm_steps(steps):
            self.console.print("[yellow]↷ Stop all steps[/]")
            report.declined = True
            return report

        logger.info("Running steps: %s", ", ".join(kind.value for kind in steps))

        with RunProgress(self.console) as ui:
            for kind in steps:
                handle = ui.add_step(kind.display_name)
                self.sudo.set_prompt_ui(ui)
                try:
                    self.run_step(kind, handle)
                except SetupError as e:
                    handle.finish_failed()
                    logger.debug("Step %s failed", kind.value, exc_info=True)
                    raise StepError(kind, e) from e
                except Exception:
                    handle.finish_failed()
                    raise
                finally:
                    self.sudo.clear_prompt_ui()

                handle.finish_ok()
                report.completed.append(kind)

        return report

    def run_step(self, kind: StepKind, progress: StepProgress) -> None:
        ctx = StepContext(
            config=self.config,
            root=self.root,
            sudo=self.sudo,
            progress=progress,
        )
        self._runners[kind](ctx)

    def confirm_steps(self, steps: Sequence[StepKind]) -> bool:
        if not steps:
            return True
        joined = ", ".join(kind.display_name for kind in steps)
        return self._confirm(f"Run all steps ({click.style(joined, bold=True)})?")

