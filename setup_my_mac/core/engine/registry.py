"""
Step registry — which steps exist, what they're called, what runs them.

The step set is closed: ``StepKind`` lists every step and
``STEP_RUNNERS`` maps each one to the function that performs it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import StrEnum

from setup_my_mac.core.engine.context import StepContext
from setup_my_mac.core.models.config import Config
from setup_my_mac.core.steps import dotfiles, git, homebrew, ssh, system

StepRunner = Callable[[StepContext], None]


class StepKind(StrEnum):
    """A bootstrap step. Values are the names accepted by ``--steps``."""

    SYSTEM = "system"
    HOMEBREW = "homebrew"
    DOTFILES = "dotfiles"
    SSH = "ssh"
    GIT = "git"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[StepKind, str] = {
    StepKind.SYSTEM: "System",
    StepKind.HOMEBREW: "Homebrew",
    StepKind.DOTFILES: "Dotfiles",
    StepKind.SSH: "SSH",
    StepKind.GIT: "Git",
}

STEP_RUNNERS: dict[StepKind, StepRunner] = {
    StepKind.SYSTEM: system.run,
    StepKind.HOMEBREW: homebrew.run,
    StepKind.DOTFILES: dotfiles.run,
    StepKind.SSH: ssh.run,
    StepKind.GIT: git.run,
}


def default_steps(config: Config) -> list[StepKind]:
    """Steps to run when none were requested.

    System always runs; the others only when their section asks for it,
    always in this order.
    """
    steps = [StepKind.SYSTEM]
    if config.homebrew.enable:
        steps.append(StepKind.HOMEBREW)
    if config.user.dotfiles:
        steps.append(StepKind.DOTFILES)
    if config.user.ssh is not None:
        steps.append(StepKind.SSH)
    if config.git_enabled:
        steps.append(StepKind.GIT)
    return steps


def resolve_steps(
    config: Config,
    requested: Sequence[StepKind] | None = None,
) -> list[StepKind]:
    """The effective step list for a run.

    A non-empty explicit list is used as given, duplicates included.
    """
    if requested:
        return list(requested)
    return default_steps(config)


def parse_step_list(raw: str) -> list[StepKind]:
    """Parse ``"system,git"`` into step kinds.

    Raises:
        ValueError: For an unknown step name.
    """
    steps: list[StepKind] = []
    for part in raw.split(","):
        name = part.strip().lower()
        if not name:
            continue
        try:
            steps.append(StepKind(name))
        except ValueError:
            valid = ", ".join(kind.value for kind in StepKind)
            raise ValueError(f"unknown step '{part.strip()}' (valid: {valid})") from None
    return steps
