"""
File helpers shared by the Dotfiles, SSH and Git steps.

Paths in the config may be ``~``-relative, absolute, or relative to
the directory holding the config file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from setup_my_mac.core.errors import FilesystemError, PathResolutionError

logger = logging.getLogger(__name__)


def resolve_path(raw: str, base_dir: Path) -> Path:
    """Expand a configured path.

    ``~`` and ``~user`` are expanded, absolute paths are kept, and
    anything else is joined onto *base_dir*.

    Raises:
        PathResolutionError: Empty input, or a home directory that
            cannot be determined.
    """
    trimmed = raw.strip()
    if not trimmed:
        raise PathResolutionError("empty path")

    if trimmed.startswith("~"):
        try:
            return Path(trimmed).expanduser()
        except RuntimeError as e:
            raise PathResolutionError(f"cannot expand {trimmed}: {e}") from e

    path = Path(trimmed)
    if path.is_absolute():
        return path
    return base_dir / path


def normalize_newlines(text: str) -> str:
    """Convert CRLF to LF and end with exactly one newline."""
    return text.replace("\r\n", "\n").rstrip("\n") + "\n"


def write_if_changed(path: Path, contents: str) -> bool:
    """Write *contents* unless the file already holds the same text.

    Comparison ignores CRLF vs LF and trailing blank lines.

    Returns:
        True if the file was written.

    Raises:
        FilesystemError: On any read/write failure.
    """
    if path.exists():
        try:
            existing = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(f"Failed to read {path}: {e}") from e
        if normalize_newlines(existing) == normalize_newlines(contents):
            logger.debug("%s unchanged", path)
            return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create {path.parent}: {e}") from e

    try:
        path.write_text(contents, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Failed to write {path}: {e}") from e
    return True
