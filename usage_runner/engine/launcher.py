"""
Launch a command, wait for it and collect the children's resource usage.

Each stage either returns its value or raises the matching ``UsageError``
subclass; no stage is retried.
"""

from __future__ import annotations

import errno
import logging
import os
import resource
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import Sequence

from usage_common.errors import (
    ClockError,
    ExecError,
    SpawnError,
    UsageQueryError,
    wrap_error,
)
from usage_runner.models.report import UsageReport

logger = logging.getLogger(__name__)

SPAWN_FAILED = "Fork failed"
EXEC_FAILED = "Exec failed"
START_TIME_FAILED = "Failed to get start time"
END_TIME_FAILED = "Failed to get end time"
USAGE_QUERY_FAILED = "Getrusage failed"

SHELL = "/bin/sh"


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of one launch: the child's identity, status and usage report."""

    argv: tuple[str, ...]
    pid: int
    exit_status: int
    report: UsageReport


def spawn(argv: Sequence[str]) -> subprocess.Popen:
    """
    Start ``argv`` as a child process.

    The command is looked up on PATH, and the child inherits the environment,
    the standard streams and every open descriptor. Like ``execvp``, a file
    the kernel refuses with ENOEXEC is run again as a ``/bin/sh`` script.
    """
    command = list(argv)
    try:
        try:
            process = subprocess.Popen(command, close_fds=False)
        except OSError as exc:
            if exc.errno != errno.ENOEXEC or exc.filename is None:
                raise
            script_argv = shell_script_argv(command)
            logger.debug("%s has no executable header, running it with %s", command[0], SHELL)
            process = subprocess.Popen(script_argv, close_fds=False)
    except OSError as exc:
        # Popen re-raises exec failures in the parent with the program name
        # attached; a failed fork carries no filename.
        if exc.filename is not None:
            raise wrap_error(
                ExecError, EXEC_FAILED, context={"argv": command}, cause=exc
            ) from exc
        raise wrap_error(
            SpawnError, SPAWN_FAILED, context={"argv": command}, cause=exc
        ) from exc
    logger.debug("Spawned %s as pid %s", command[0], process.pid)
    return process


def shell_script_argv(command: Sequence[str]) -> list[str]:
    """Return ``/bin/sh <script> args...`` for a command without a header."""
    program = command[0]
    if os.sep not in program:
        program = shutil.which(program) or program
    return [SHELL, program, *command[1:]]


def wall_clock(stage: str) -> int:
    """Read the wall clock with whole-second resolution."""
    try:
        return int(time.time())
    except OSError as exc:
        raise wrap_error(ClockError, stage, cause=exc) from exc


def wait(process: subprocess.Popen) -> int:
    """
    Block until the child terminates and return its raw exit status.

    An interrupt during the wait still reaps the child before propagating.
    """
    try:
        status = process.wait()
    except KeyboardInterrupt:
        process.wait()
        raise
    logger.debug("Child %s exited with status %s", process.pid, status)
    return status


def query_usage() -> resource.struct_rusage:
    """Return cumulative rusage for every terminated child of this process."""
    try:
        return resource.getrusage(resource.RUSAGE_CHILDREN)
    except (OSError, ValueError) as exc:
        raise wrap_error(UsageQueryError, USAGE_QUERY_FAILED, cause=exc) from exc


def run_command(argv: Sequence[str], ticks_per_second: int | None = None) -> LaunchResult:
    """
    Run ``argv`` to completion and report its resource usage.

    The start timestamp is taken once the spawn call has returned, so it lags
    the real start of the child slightly.

    Raises:
        SpawnError: the child process could not be created.
        ExecError: the command could not be found or executed.
        ClockError: a timestamp could not be read.
        UsageQueryError: getrusage failed.
    """
    if not argv:
        raise ValueError("a command is required")

    process = spawn(argv)
    start_time = wall_clock(START_TIME_FAILED)
    status = wait(process)
    end_time = wall_clock(END_TIME_FAILED)
    usage = query_usage()

    report = UsageReport.from_rusage(
        usage, wall_seconds=float(end_time - start_time), ticks_per_second=ticks_per_second
    )
    logger.debug("Collected usage for pid %s: %s", process.pid, report.to_dict())
    return LaunchResult(
        argv=tuple(argv),
        pid=process.pid,
        exit_status=status,
        report=report,
    )
