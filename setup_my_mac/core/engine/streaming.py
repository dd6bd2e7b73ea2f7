"""
Command streaming — run a process and relay its output live.

stdout and stderr are drained by one reader thread each, so a chatty
child can never block on a full pipe while we wait for it.  Both
threads are joined before ``stream_process`` returns: when it returns,
every line the child wrote has been forwarded.

Lines of one stream keep their order; stdout and stderr lines are not
ordered relative to each other.

There is no timeout. A command that hangs hangs the run.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Literal

from rich.text import Text

from setup_my_mac.core.engine.progress import LineSink
from setup_my_mac.core.errors import CommandError

logger = logging.getLogger(__name__)

StreamName = Literal["stdout", "stderr"]


def stream_process(
    cmd: Sequence[str],
    label: str,
    sink: LineSink,
    *,
    cwd: Path | None = None,
) -> int:
    """Run *cmd*, forwarding each output line to *sink*.

    stdin is inherited so the child can still prompt the user.

    Args:
        cmd: Program and arguments.
        label: Short name used to prefix forwarded lines.
        sink: Receives one ``println`` per output line.
        cwd: Optional working directory.

    Returns:
        The process exit code. Callers decide what counts as failure.

    Raises:
        CommandError: If the process could not be started.
    """
    logger.debug("Streaming command: %s (label=%s)", list(cmd), label)
    try:
        proc = subprocess.Popen(
            list(cmd),
            cwd=str(cwd) if cwd else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise CommandError(label, f"failed to spawn {label}: {e}") from e

    readers = [
        _start_reader(proc.stdout, label, "stdout", sink),
        _start_reader(proc.stderr, label, "stderr", sink),
    ]

    returncode = proc.wait()
    for reader in readers:
        reader.join()

    logger.debug("%s exited with %d", label, returncode)
    return returncode


def _start_reader(
    pipe: IO[bytes] | None,
    label: str,
    stream: StreamName,
    sink: LineSink,
) -> threading.Thread:
    thread = threading.Thread(
        target=_forward_lines,
        args=(pipe, label, stream, sink),
        name=f"stream-{label}-{stream}",
        daemon=True,
    )
    thread.start()
    return thread


def _forward_lines(
    pipe: IO[bytes] | None,
    label: str,
    stream: StreamName,
    sink: LineSink,
) -> None:
    if pipe is None:
        return

    prefix = f"[{label}]" if stream == "stdout" else f"[{label}:{stream}]"
    try:
        for raw in iter(pipe.readline, b""):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                _report_read_error(sink, label, stream, e)
                # Keep the pipe drained so the child cannot stall.
                _drain(pipe)
                return
            sink.println(Text.assemble("  ", (prefix, "dim"), " ", line.rstrip("\r\n")))
    except OSError as e:
        _report_read_error(sink, label, stream, e)
    finally:
        pipe.close()


def _drain(pipe: IO[bytes]) -> None:
    try:
        while pipe.read(65536):
            pass
    except OSError:
        logger.debug("pipe closed while draining", exc_info=True)


def _report_read_error(
    sink: LineSink,
    label: str,
    stream: StreamName,
    error: Exception,
) -> None:
    logger.warning("%s %s read error: %s", label, stream, error)
    sink.println(
        Text.assemble("  ", (f"[{label}:{stream}]", "red"), f" stream read error: {error}")
    )
