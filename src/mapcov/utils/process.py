"""Subprocess execution with concurrent stream draining.

External tools write a lot to their standard streams (bowtie2 alignment
summaries, Picard progress lines). Both streams are consumed by reader
threads while the process runs so a full pipe buffer never blocks the child.

Two drain modes are supported:

* combined: stderr is merged into stdout and appended to the log file;
* split: stdout is written to a designated output file (tools whose primary
  result is their standard output) while stderr goes to the log file.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, Optional, Sequence

from mapcov.exceptions import ExternalToolError

TIMEOUT_EXIT_STATUS = -1


def _pump(
    stream: IO[bytes],
    sink: IO[bytes],
    echo: Optional[logging.Logger] = None,
) -> None:
    """Copy a process stream into ``sink`` line by line until EOF."""
    for line in iter(stream.readline, b""):
        sink.write(line)
        sink.flush()
        if echo is not None:
            echo.info(line.decode(errors="replace").rstrip())
    stream.close()


def _start_pump(
    stream: IO[bytes],
    sink: IO[bytes],
    echo: Optional[logging.Logger],
    name: str,
) -> threading.Thread:
    thread = threading.Thread(target=_pump, args=(stream, sink, echo), name=name, daemon=True)
    thread.start()
    return thread


def run_process(
    cmd: Sequence[str],
    log_file: Path,
    stdout_file: Optional[Path] = None,
    echo: Optional[logging.Logger] = None,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> int:
    """Run ``cmd`` to completion and return its exit status.

    Args:
        cmd: Argument vector; executed without a shell
        log_file: File the tool's log output is appended to
        stdout_file: When given, stdout is written to this file (truncated)
            and only stderr goes to ``log_file``
        echo: Logger that receives every drained line (verbose mode)
        cwd: Working directory for the command
        timeout: Seconds before the process is killed; a timeout is reported
            as ``TIMEOUT_EXIT_STATUS``

    Raises:
        ExternalToolError: If the executable cannot be started at all
    """
    args = [str(c) for c in cmd]
    log_file.parent.mkdir(parents=True, exist_ok=True)

    with open(log_file, "ab") as log_handle:
        out_handle = open(stdout_file, "wb") if stdout_file is not None else None
        try:
            try:
                process = subprocess.Popen(
                    args,
                    cwd=cwd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE if out_handle is not None else subprocess.STDOUT,
                )
            except OSError as e:
                raise ExternalToolError(
                    f"Failed to execute {args[0]}", command=args, returncode=-1, stderr=str(e)
                ) from e

            pumps = []
            if out_handle is not None:
                pumps.append(_start_pump(process.stdout, out_handle, echo, "stdout-drain"))
                pumps.append(_start_pump(process.stderr, log_handle, echo, "stderr-drain"))
            else:
                pumps.append(_start_pump(process.stdout, log_handle, echo, "output-drain"))

            try:
                returncode = process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
                returncode = TIMEOUT_EXIT_STATUS
            finally:
                for pump in pumps:
                    pump.join()
        finally:
            if out_handle is not None:
                out_handle.close()

    return returncode
