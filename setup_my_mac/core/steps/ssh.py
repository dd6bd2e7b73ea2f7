"""SSH step — write ~/.ssh/config with owner-only permissions."""

from __future__ import annotations

import logging
import os

from setup_my_mac.core.engine.context import StepContext
from setup_my_mac.core.errors import FilesystemError
from setup_my_mac.core.services.files import normalize_newlines, resolve_path, write_if_changed

logger = logging.getLogger(__name__)

KEY = "🗝"


def run(ctx: StepContext) -> None:
    ssh_cfg = ctx.config.user.ssh
    if ssh_cfg is None:
        ctx.status("No SSH config provided, skipping")
        return

    ctx.status(f"{KEY} syncing ~/.ssh/config")

    ssh_dir = resolve_path("~/.ssh", ctx.root)
    try:
        ssh_dir.mkdir(parents=True, exist_ok=True)
        os.chmod(ssh_dir, 0o700)
    except OSError as e:
        raise FilesystemError(f"creating {ssh_dir}: {e}") from e

    config_path = ssh_dir / "config"
    content = normalize_newlines(ssh_cfg.config)
    ctx.info(f"updating {config_path}\n------\n{content}------")
    logger.info("updating %s\n------\n%s------", config_path, content)

    changed = write_if_changed(config_path, content)

    try:
        os.chmod(config_path, 0o600)
    except OSError as e:
        raise FilesystemError(f"setting permissions on {config_path}: {e}") from e

    if changed:
        ctx.info(f"updated {config_path}")
        logger.info("updated %s", config_path)
    else:
        ctx.info(f"{config_path} already up to date")
        logger.info("%s already up to date", config_path)
