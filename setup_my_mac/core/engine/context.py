"""
Step context — everything a step gets to work with.

A fresh context is built for every step invocation and dropped when
the step returns. It bundles a read-only view of the config, the
directory relative paths resolve against, the run's sudo session and
the step's progress handle, plus logging/streaming conveniences.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from rich.text import Text

from setup_my_mac.core.engine.progress import StepProgress
from setup_my_mac.core.engine.streaming import stream_process
from setup_my_mac.core.engine.sudo import SudoSession
from setup_my_mac.core.models.config import Config

logger = logging.getLogger(__name__)


class StepLogLevel(StrEnum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


_LEVEL_STYLES = {
    StepLogLevel.INFO: "dim",
    StepLogLevel.WARN: "yellow",
    StepLogLevel.ERROR: "red",
}


@dataclass(frozen=True)
class StepContext:
    """Per-invocation view handed to a step runner."""

    config: Config
    root: Path
    sudo: SudoSession
    progress: StepProgress

    def status(self, message: str) -> None:
        """Replace the step's status text."""
        self.progress.set_message(message)

    def log(self, level: StepLogLevel, message: str) -> None:
        """Print a tagged line under the step."""
        self.progress.println(
            Text.assemble("  ", (f"[{level}]", _LEVEL_STYLES[level]), " ", message)
        )

    def info(self, message: str) -> None:
        self.log(StepLogLevel.INFO, message)

    def warn(self, message: str) -> None:
        self.log(StepLogLevel.WARN, message)

    def error(self, message: str) -> None:
        self.log(StepLogLevel.ERROR, message)

    def stream_command(self, cmd: Sequence[str], label: str) -> int:
        """Run *cmd* with its output relayed under this step.

        Returns the exit code; the caller decides whether it is a failure.
        """
        return stream_process(cmd, label, self.progress)
