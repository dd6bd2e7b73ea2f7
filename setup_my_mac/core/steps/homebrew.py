"""Homebrew step — install formulas and casks with ``brew bundle``."""

from __future__ import annotations

import logging
import subprocess
import tempfile

from setup_my_mac.core.engine.context import StepContext
from setup_my_mac.core.errors import CommandError
from setup_my_mac.core.models.config import HomebrewConfig

logger = logging.getLogger(__name__)

PACKAGE = "📦"


def run(ctx: StepContext) -> None:
    hb = ctx.config.homebrew
    if not hb.enable:
        ctx.status("Homebrew disabled in config, skipping")
        return

    ensure_brew_available()

    if not hb.brews and not hb.casks:
        ctx.status("No Homebrew packages configured, skipping")
        return

    ctx.status(f"{PACKAGE} brew bundle")
    ensure_bundle(ctx, hb)


def ensure_brew_available() -> None:
    """Raise CommandError unless ``brew`` can be run."""
    try:
        result = subprocess.run(
            ["brew", "--version"],
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CommandError("brew", f"brew is not available: {e}") from e
    if result.returncode != 0:
        raise CommandError("brew", "brew is not available", result.returncode)
    logger.debug("using %s", result.stdout.splitlines()[0] if result.stdout else "brew")


def ensure_bundle(ctx: StepContext, cfg: HomebrewConfig) -> None:
    logger.info(
        "Preparing Brewfile with %d brews and %d casks",
        len(cfg.brews),
        len(cfg.casks),
    )

    with tempfile.NamedTemporaryFile("w", encoding="utf-8", prefix="Brewfile.") as tmp:
        tmp.write(render_brewfile(cfg))
        tmp.flush()
        returncode = ctx.stream_command(
            ["brew", "bundle", "--file", tmp.name],
            "brew bundle",
        )

    if returncode != 0:
        raise CommandError("brew bundle", returncode=returncode)


def render_brewfile(cfg: HomebrewConfig) -> str:
    lines = [f'brew "{formula}"' for formula in cfg.brews]
    lines += [f'cask "{cask}"' for cask in cfg.casks]
    return "".join(f"{line}\n" for line in lines)
