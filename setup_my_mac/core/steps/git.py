"""
Git step — global git preferences and ignore file.

Each key is only written when ``git config --global --get`` reports a
different value, so re-runs leave ~/.gitconfig untouched.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from setup_my_mac.core.engine.context import StepContext
from setup_my_mac.core.errors import CommandError
from setup_my_mac.core.models.config import GitConfig
from setup_my_mac.core.services.files import resolve_path, write_if_changed

logger = logging.getLogger(__name__)

BRANCH = "🌿"

GLOBAL_IGNORE = "~/.config/git/ignore"


# ── Low-level runner ────────────────────────────────────────────


def run_git(*args: str) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result.

    No timeout: like every other external command in a run, a hung
    git hangs the run.
    """
    try:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CommandError("git", str(e)) from e


# ── Step ────────────────────────────────────────────────────────


def run(ctx: StepContext) -> None:
    git_cfg = ctx.config.user.git
    if git_cfg is None:
        ctx.status("No git settings configured, skipping")
        return

    if not git_cfg.enable:
        ctx.status("user.git.enable is false, skipping git module")
        return

    if not git_cfg.has_work():
        ctx.status("No git preferences provided, skipping")
        return

    ctx.status(f"{BRANCH} applying git config")
    apply_git_config(git_cfg, ctx.root)


def apply_git_config(cfg: GitConfig, root: Path) -> None:
    for key, value in cfg.settings():
        ensure_git_config(key, value)

    if cfg.ignores:
        ensure_global_ignore(cfg.ignores, root)


def git_get(key: str) -> str | None:
    """Current global value of *key*, or None when unset."""
    r = run_git("config", "--global", "--get", key)
    if r.returncode == 0:
        return r.stdout.strip()
    if r.returncode == 1:
        return None
    raise CommandError(f"git config --get {key}", r.stderr, r.returncode)


def ensure_git_config(key: str, value: str) -> bool:
    """Set *key* globally unless it already equals *value*.

    Returns:
        True if git config was written.
    """
    if git_get(key) == value:
        logger.info("git %s already set", key)
        return False

    r = run_git("config", "--global", key, value)
    if r.returncode != 0:
        raise CommandError(f"git config {key}", r.stderr, r.returncode)
    logger.info("git %s = %s", key, value)
    return True


def ensure_global_ignore(ignores: list[str], root: Path) -> None:
    path = resolve_path(GLOBAL_IGNORE, root)
    body = "\n".join(ignores) + "\n"
    if write_if_changed(path, body):
        logger.info("updated global gitignore at %s", path)
    ensure_git_config("core.excludesFile", str(path))
