"""
macOS preference adapter — ``defaults``, ``systemsetup`` and pam.d.

Reads of the current state never fail the run: anything unreadable
counts as "unknown" and the desired value is written.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

from setup_my_mac.core.engine.sudo import SudoSession
from setup_my_mac.core.errors import CommandError, FilesystemError

logger = logging.getLogger(__name__)

DEFAULTS = "/usr/bin/defaults"
SYSTEMSETUP = "/usr/sbin/systemsetup"

PAM_SUDO_LOCAL = Path("/etc/pam.d/sudo_local")
PAM_SUDO = Path("/etc/pam.d/sudo")
PAM_TID_LINE = "auth       sufficient     pam_tid.so"

_TRUE_VALUES = frozenset({"1", "YES", "TRUE", "true"})
_FALSE_VALUES = frozenset({"0", "NO", "FALSE", "false"})


# ── defaults ────────────────────────────────────────────────────


def read_defaults_bool(domain: str, key: str) -> bool | None:
    """Current boolean value of ``domain key``, or None if unknown."""
    try:
        result = subprocess.run(
            [DEFAULTS, "read", domain, key],
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        logger.debug("defaults read %s %s failed: %s", domain, key, e)
        return None

    if result.returncode != 0:
        return None

    raw = result.stdout.strip()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return None


def ensure_defaults_bool(domain: str, key: str, desired: bool) -> bool:
    """Write ``domain key`` unless it already holds *desired*.

    Returns:
        True if a write happened.
    """
    if read_defaults_bool(domain, key) == desired:
        logger.debug("defaults %s %s already %s", domain, key, desired)
        return False

    flag = "TRUE" if desired else "FALSE"
    program = f"defaults write {domain} {key}"
    try:
        result = subprocess.run(
            [DEFAULTS, "write", domain, key, "-bool", flag],
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CommandError(program, str(e)) from e

    if result.returncode != 0:
        raise CommandError(program, result.stderr, result.returncode)
    return True


# ── systemsetup ─────────────────────────────────────────────────


def ensure_timezone(sudo: SudoSession, target: str) -> bool:
    """Set the system timezone unless it is already *target*.

    Returns:
        True if the timezone was changed.
    """
    try:
        current = sudo.run_with_output(SYSTEMSETUP, ["-gettimezone"])
    except CommandError as e:
        logger.debug("could not read timezone: %s", e)
        current = ""

    # Output looks like "Time Zone: America/Los_Angeles"
    if current.strip().endswith(target):
        logger.info("timezone already %s", target)
        return False

    sudo.run(SYSTEMSETUP, ["-settimezone", target])
    return True


# ── pam.d ───────────────────────────────────────────────────────


def enable_touch_id(sudo: SudoSession) -> bool:
    """Allow Touch ID to satisfy sudo by prepending pam_tid.so.

    Returns:
        True if the pam file was rewritten.
    """
    contents = _read_pam_sudo()
    if "pam_tid.so" in contents:
        logger.info("Touch ID for sudo already enabled")
        return False

    dest = str(PAM_SUDO_LOCAL)
    with tempfile.NamedTemporaryFile("w", encoding="utf-8", suffix=".pam") as tmp:
        tmp.write(f"{PAM_TID_LINE}\n{contents}")
        tmp.flush()
        sudo.run("/bin/cp", [tmp.name, dest])
    sudo.run("/bin/chmod", ["644", dest])
    return True


def _read_pam_sudo() -> str:
    try:
        return PAM_SUDO_LOCAL.read_text(encoding="utf-8")
    except FileNotFoundError:
        pass
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(f"reading {PAM_SUDO_LOCAL}: {e}") from e

    try:
        return PAM_SUDO.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(f"reading {PAM_SUDO}: {e}") from e
