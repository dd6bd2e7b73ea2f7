"""
Sudo session — a time-boxed privilege ticket.

The SINGLE PLACE where commands are run through ``sudo``. One session
is created per run and handed to every step through its context, so
the ticket is only ever touched by the thread driving the steps.

Ticket rules:
    - A ticket is valid iff ``valid_until`` is set and in the future.
    - ``sudo -n true`` probes for credentials sudo already cached;
      on success the ticket is extended without prompting.
    - Otherwise ``sudo -v`` prompts the user (the live display is
      suspended while it does).
    - Any privileged command that exits non-zero drops the ticket, so
      the next call re-validates instead of trusting the window.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager, nullcontext
from typing import Protocol

from setup_my_mac.core.errors import AuthenticationError, CommandError

logger = logging.getLogger(__name__)

SUDO_TTL_SECONDS = 4 * 60


class PromptUI(Protocol):
    """Something that must get out of the way while sudo asks for a password."""

    def suspended(self) -> AbstractContextManager[None]: ...


class SudoSession:
    """Runs privileged commands, re-prompting only when the ticket lapsed.

    Args:
        clock: Monotonic time source in seconds (tests inject a fake).
        ttl: Ticket lifetime in seconds.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        ttl: float = SUDO_TTL_SECONDS,
    ) -> None:
        self._clock = clock
        self._ttl = ttl
        self.valid_until: float | None = None
        self._prompt_ui: PromptUI | None = None

    # ── Prompt UI ───────────────────────────────────────────────

    def set_prompt_ui(self, ui: PromptUI) -> None:
        self._prompt_ui = ui

    def clear_prompt_ui(self) -> None:
        self._prompt_ui = None

    # ── Ticket ──────────────────────────────────────────────────

    @property
    def has_ticket(self) -> bool:
        return self.valid_until is not None and self.valid_until > self._clock()

    def invalidate(self) -> None:
        self.valid_until = None

    def ensure_ticket(self) -> None:
        """Make sure sudo will not prompt for the next TTL window.

        Raises:
            AuthenticationError: The user could not be authenticated.
        """
        if self.has_ticket:
            return

        if self._probe_cached_credentials():
            logger.debug("sudo credentials already cached")
            self._extend()
            return

        self._prompt()

    def _probe_cached_credentials(self) -> bool:
        try:
            result = subprocess.run(
                ["sudo", "-n", "true"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug("sudo probe failed: %s", e)
            return False
        return result.returncode == 0

    def _prompt(self) -> None:
        ui = self._prompt_ui
        guard = ui.suspended() if ui is not None else nullcontext()
        try:
            with guard:
                result = subprocess.run(["sudo", "-v"])
        except OSError as e:
            raise AuthenticationError(f"failed to refresh sudo credentials: {e}") from e

        if result.returncode != 0:
            raise AuthenticationError("sudo authentication failed")
        self._extend()

    def _extend(self) -> None:
        self.valid_until = self._clock() + self._ttl

    # ── Commands ────────────────────────────────────────────────

    def run(self, program: str, args: Sequence[str] = ()) -> None:
        """Run ``sudo program args``.

        Raises:
            AuthenticationError: If a ticket could not be obtained.
            CommandError: If the program exits non-zero.
        """
        result = self._exec(program, args)
        if result.returncode != 0:
            raise CommandError(program, result.stderr, result.returncode)
        if result.stdout:
            logger.debug("sudo %s stdout: %s", program, result.stdout.rstrip())
        if result.stderr:
            logger.debug("sudo %s stderr: %s", program, result.stderr.rstrip())

    def run_with_output(self, program: str, args: Sequence[str] = ()) -> str:
        """Run ``sudo program args`` and return its trimmed stdout."""
        result = self._exec(program, args)
        if result.returncode != 0:
            raise CommandError(program, result.stderr, result.returncode)
        return result.stdout.strip()

    def _exec(
        self,
        program: str,
        args: Sequence[str],
    ) -> subprocess.CompletedProcess[str]:
        self.ensure_ticket()

        cmd = ["sudo", program, *args]
        logger.debug("Executing: %s", cmd)
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            self.invalidate()
            raise CommandError(program, f"unable to spawn sudo: {e}") from e

        if result.returncode != 0:
            # Privileges may have been revoked mid-run.
            self.invalidate()
        return result
