from __future__ import annotations

import os
import signal
import subprocess
from typing import Sequence

import structlog

from .classifier import classify
from .types import ExecutionContext, Result

logger = structlog.get_logger(__name__)

POLL_INTERVAL_S = 0.1


def build_cmdline(launcher: str, command: Sequence[str], version: str) -> list[str]:
    return [launcher, "-r", version, "--", *command]


def run_one(
    ctx: ExecutionContext, launcher: str, command: Sequence[str], version: str
) -> Result:
    """Boot `version` through the launcher and run `command` inside it.

    The launcher and everything it spawned are killed as soon as `ctx` is cancelled. A killed
    process is classified like any other non-zero exit.
    """
    cmdline = build_cmdline(launcher, command, version)
    log = logger.bind(version=version, cmdline=cmdline)
    log.debug("Running command")

    try:
        returncode, stdout, stderr = _execute(ctx, cmdline)
    except OSError as exc:
        log.debug("Command could not be started", error=str(exc))
        returncode, stdout, stderr = -1, "", str(exc)

    log.debug("Command complete", returncode=returncode)
    outcome, message = classify(returncode == 0, stdout, stderr)
    return Result(version, outcome, message)


def _execute(ctx: ExecutionContext, cmdline: list[str]) -> tuple[int, str, str]:
    with subprocess.Popen(
        cmdline,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        errors="replace",
        start_new_session=True,
    ) as proc:
        while True:
            if ctx.cancelled:
                _kill_group(proc)
                stdout, stderr = proc.communicate()
                break
            try:
                stdout, stderr = proc.communicate(timeout=POLL_INTERVAL_S)
                break
            except subprocess.TimeoutExpired:
                continue

        return proc.returncode, stdout, stderr


def _kill_group(proc: subprocess.Popen) -> None:
    # Children of the launcher hold the output pipes open; kill the whole
    # session so communicate() returns at once.
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
