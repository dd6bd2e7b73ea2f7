"""
Logging configuration — set up once by the CLI entrypoint.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this config.  Console records are rendered by rich so they print above
the live step display instead of tearing through the spinner rows.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  --quiet  >  SMM_LOG_LEVEL env var  >  WARNING

An extra plain-text log file can be requested with SMM_LOG_FILE
(and SMM_LOG_FILE_LEVEL for a separate threshold).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# File output — always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_DATEFMT_CONSOLE = "[%X]"

# Libraries whose INFO chatter is not worth showing
_NOISY_LOGGERS = ("markdown_it", "asyncio")


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console log level from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure Python logging for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a plain-text log file.
        log_file_level: Optional separate level for the log file.
            Defaults to ``level``.
        quiet_third_party: Keep library loggers at WARNING unless
            the console is at DEBUG.
    """
    numeric_level = _parse_level(level)
    at_debug = numeric_level <= logging.DEBUG

    console = RichHandler(
        console=Console(stderr=True),
        level=numeric_level,
        show_time=numeric_level <= logging.INFO,
        show_path=at_debug,
        log_time_format=_DATEFMT_CONSOLE,
        markup=False,
        rich_tracebacks=at_debug,
    )
    console.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and not at_debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
