"""
Shell command adapter — executes commands via subprocess.

Used by the exec handler and by the ``run``/``run_file`` helpers of
guard expressions. Commands go through bash when it is installed and
the default ``/bin/sh`` otherwise.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import subprocess
import time
from pathlib import Path

from scaffoldkit.adapters.base import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by ``subprocess.run``."""

    def __init__(self, shell_executable: str | None = None):
        self._executable = shell_executable or shutil.which("bash")

    def run(
        self,
        command: str,
        cwd: Path,
        stdin: str | None = None,
        stdout_to: Path | None = None,
        stderr_to: Path | None = None,
        timeout: float = 300,
    ) -> ProcessResult:
        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        with contextlib.ExitStack() as stack:
            stdout_target = subprocess.PIPE
            stderr_target = subprocess.PIPE
            if stdout_to is not None:
                stdout_to.parent.mkdir(parents=True, exist_ok=True)
                stdout_target = stack.enter_context(open(stdout_to, "w", encoding="utf-8"))
            if stderr_to is not None:
                stderr_to.parent.mkdir(parents=True, exist_ok=True)
                stderr_target = stack.enter_context(open(stderr_to, "w", encoding="utf-8"))

            try:
                result = subprocess.run(
                    command,
                    shell=True,
                    executable=self._executable,
                    cwd=cwd,
                    input=stdin,
                    stdin=None if stdin is not None else subprocess.DEVNULL,
                    stdout=stdout_target,
                    stderr=stderr_target,
                    text=True,
                    timeout=timeout,
                )
            except subprocess.TimeoutExpired:
                logger.warning("Command timed out after %ss: %s", timeout, command)
                return ProcessResult(
                    command=command,
                    exit_code=-1,
                    timed_out=True,
                    duration_ms=int((time.monotonic() - start) * 1000),
                )

        return ProcessResult(
            command=command,
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            duration_ms=int((time.monotonic() - start) * 1000),
        )
