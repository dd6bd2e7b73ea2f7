"""
Error types — every failure a run can end with.

A step either returns normally or raises one of these. The runner
wraps these in ``StepError`` (the step's error becomes ``__cause__``)
and stops the run. Nothing here is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from setup_my_mac.core.engine.registry import StepKind


class SetupError(Exception):
    """Base class for all expected failures."""


class AuthenticationError(SetupError):
    """Raised when sudo refuses to grant elevated privileges."""


class CommandError(SetupError):
    """Raised when an external program exits unsuccessfully."""

    def __init__(
        self,
        program: str,
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        self.program = program
        self.stderr = stderr.strip()
        self.returncode = returncode
        detail = self.stderr or (
            f"exit code {returncode}" if returncode is not None else "failed"
        )
        super().__init__(f"command `{program}` failed: {detail}")


class FilesystemError(SetupError):
    """Raised when reading, writing or moving a file fails."""


class PathResolutionError(SetupError):
    """Raised when a configured path cannot be expanded."""


class StepError(SetupError):
    """A step failed; the run stops here."""

    def __init__(self, kind: StepKind, cause: BaseException) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(f"{kind.display_name} step failed: {cause}")


def error_chain(exc: BaseException) -> list[str]:
    """Messages of the causes chained below *exc*, outermost first.

    Causes whose text is already part of the parent message are left out,
    so ``StepError`` does not repeat the error it wraps.
    """
    messages: list[str] = []
    parent = str(exc)
    current = exc.__cause__
    while current is not None:
        text = str(current)
        if text and text not in parent:
            messages.append(text)
        parent = text
        current = current.__cause__
    return messages
