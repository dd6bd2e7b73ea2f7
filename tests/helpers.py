"""
Test helpers — config builders and fake collaborators.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from rich.text import Text

from setup_my_mac.core.models.config import Config


def make_config(**sections: Any) -> Config:
    """Build a Config from the minimal document plus overridden sections."""
    data: dict[str, Any] = {
        "system": {"home_directory": "/Users/tester", "primary_user": "tester"},
        "user": {},
    }
    data.update(sections)
    return Config.model_validate(data)


class RecordingProgress:
    """Stands in for StepProgress; keeps what a step printed."""

    def __init__(self, name: str = "Test") -> None:
        self.name = name
        self.messages: list[str] = []
        self.lines: list[str] = []
        self.outcome: str | None = None

    def set_message(self, message: str) -> None:
        self.messages.append(message)

    def println(self, line: Text | str) -> None:
        self.lines.append(line.plain if isinstance(line, Text) else line)

    def finish_ok(self) -> None:
        self.outcome = "ok"

    def finish_failed(self) -> None:
        self.outcome = "failed"


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSudoBinary:
    """Replaces ``subprocess.run`` for sudo calls.

    ``sudo -n true`` succeeds iff ``probe_ok``; ``sudo -v`` iff
    ``prompt_ok``; any other command exits with ``command_rc``.
    """

    def __init__(
        self,
        *,
        probe_ok: bool = False,
        prompt_ok: bool = True,
        command_rc: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.probe_ok = probe_ok
        self.prompt_ok = prompt_ok
        self.command_rc = command_rc
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append(list(cmd))
        if cmd[:3] == ["sudo", "-n", "true"]:
            return subprocess.CompletedProcess(cmd, 0 if self.probe_ok else 1)
        if cmd[:2] == ["sudo", "-v"]:
            return subprocess.CompletedProcess(cmd, 0 if self.prompt_ok else 1)
        return subprocess.CompletedProcess(cmd, self.command_rc, self.stdout, self.stderr)

    @property
    def probes(self) -> int:
        return sum(1 for c in self.calls if c[:3] == ["sudo", "-n", "true"])

    @property
    def prompts(self) -> int:
        return sum(1 for c in self.calls if c[:2] == ["sudo", "-v"])

    @property
    def commands(self) -> list[list[str]]:
        return [c for c in self.calls if c[1] not in ("-n", "-v")]


class RecordingPromptUI:
    """Records whether the display was suspended around the sudo prompt."""

    def __init__(self) -> None:
        self.suspensions = 0
        self.active = False

    @contextmanager
    def suspended(self) -> Iterator[None]:
        self.suspensions += 1
        self.active = True
        try:
            yield
        finally:
            self.active = False
