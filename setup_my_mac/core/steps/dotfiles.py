"""
Dotfiles step — copy configured files and directories into place.

Files are copied only when the content differs; an existing target
that would be replaced is first renamed to ``<name>.bak`` (or
``.bak.1``, ``.bak.2``, … if that is taken). Directory sources always
back up an existing target, then copy the tree file by file.
"""

from __future__ import annotations

import filecmp
import logging
import shutil
from pathlib import Path

from setup_my_mac.core.engine.context import StepContext
from setup_my_mac.core.errors import FilesystemError, PathResolutionError
from setup_my_mac.core.models.config import DotfileEntry
from setup_my_mac.core.services.files import resolve_path

logger = logging.getLogger(__name__)

LINK = "🔗"


def run(ctx: StepContext) -> None:
    dotfiles = ctx.config.user.dotfiles
    if not dotfiles:
        ctx.status("No dotfiles requested, skipping module")
        return

    for name, entry in dotfiles.items():
        ctx.info(f"{LINK} syncing dotfile {name}")
        sync_entry(entry, ctx.root)


def sync_entry(entry: DotfileEntry, root: Path) -> None:
    """Bring ``entry.target`` in line with ``entry.source``."""
    source = _resolve(entry.source, root)
    target = _resolve(entry.target, root)

    if not source.exists():
        raise FilesystemError(f"source {source} does not exist")

    if source.is_dir():
        if target.exists():
            backup_existing(target)
        _sync_dir(source, target)
        return

    if target.exists():
        if not files_differ(source, target):
            logger.debug("%s already matches %s", target, source)
            return
        backup_existing(target)
    copy_file(source, target)


def _resolve(raw: str, root: Path) -> Path:
    try:
        return resolve_path(raw, root)
    except PathResolutionError as e:
        raise PathResolutionError(f"resolving {raw!r}: {e}") from e


def _sync_dir(source: Path, target: Path) -> None:
    try:
        target.mkdir(parents=True, exist_ok=True)
        for path in sorted(source.rglob("*")):
            dest = target / path.relative_to(source)
            if path.is_dir():
                dest.mkdir(parents=True, exist_ok=True)
            else:
                copy_file(path, dest)
    except OSError as e:
        raise FilesystemError(f"copying directory {source} -> {target}: {e}") from e


def copy_file(source: Path, target: Path) -> None:
    """Copy *source* over *target* unless they already match."""
    if target.exists() and not files_differ(source, target):
        return
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
    except OSError as e:
        raise FilesystemError(f"copying {source} -> {target}: {e}") from e
    logger.info("copied %s -> %s", source, target)


def files_differ(a: Path, b: Path) -> bool:
    if not b.exists():
        return True
    try:
        return not filecmp.cmp(a, b, shallow=False)
    except OSError as e:
        raise FilesystemError(f"comparing {a} and {b}: {e}") from e


def backup_existing(target: Path) -> Path:
    """Move *target* aside and return where it went."""
    backup = next_backup_path(target)
    try:
        target.rename(backup)
    except OSError as e:
        raise FilesystemError(f"renaming {target} -> {backup}: {e}") from e
    logger.info("backed up %s to %s", target, backup)
    return backup


def next_backup_path(target: Path) -> Path:
    if not target.name:
        raise PathResolutionError(f"{target} has no file name")

    candidate = target.with_name(f"{target.name}.bak")
    attempt = 1
    while candidate.exists():
        candidate = target.with_name(f"{target.name}.bak.{attempt}")
        attempt += 1
    return candidate
