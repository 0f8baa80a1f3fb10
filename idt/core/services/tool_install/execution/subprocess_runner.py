"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for install
operations. Every backend receives a ``CommandRunner`` so tests can
swap in a recording double.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from idt.core.errors import ProcessFailed, SpawnFailed
from idt.core.services.tool_install.data.constants import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# Keep only the tail of captured output in errors and logs.
_TAIL = 2000


@dataclass
class CommandResult:
    """Captured outcome of a finished command."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0


class CommandRunner:
    """Run external commands, raising the backend error taxonomy.

    - executable not found → ``SpawnFailed``
    - non-zero exit (or timeout) → ``ProcessFailed``
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        env_overrides: dict[str, str] | None = None,
    ):
        self.timeout = timeout
        self.env_overrides = dict(env_overrides or {})

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        stdin_path: Path | None = None,
        stdout_path: Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run ``cmd`` to completion.

        Args:
            cmd: Command list, no shell involved.
            cwd: Working directory.
            stdin_path: File fed to the command's stdin.
            stdout_path: File receiving the command's stdout (binary)
                instead of capturing it.
            timeout: Seconds before the command is killed.

        Returns:
            CommandResult with decoded stdout/stderr (stdout is empty
            when redirected to ``stdout_path``).

        Raises:
            SpawnFailed: The executable does not exist or cannot be run.
            ProcessFailed: The command exited non-zero or timed out.
        """
        cmd = [str(part) for part in cmd]
        program = cmd[0]
        if shutil.which(program) is None:
            raise SpawnFailed(program)

        env = os.environ.copy()
        for key, value in self.env_overrides.items():
            env[key] = os.path.expandvars(value)

        limit = timeout or self.timeout
        logger.debug("Running: %s", shlex.join(cmd))
        start = time.monotonic()

        with ExitStack() as stack:
            stdin = stack.enter_context(open(stdin_path, "rb")) if stdin_path else subprocess.DEVNULL
            stdout = stack.enter_context(open(stdout_path, "wb")) if stdout_path else subprocess.PIPE
            try:
                proc = subprocess.run(
                    cmd,
                    cwd=cwd,
                    env=env,
                    stdin=stdin,
                    stdout=stdout,
                    stderr=subprocess.PIPE,
                    timeout=limit,
                )
            except subprocess.TimeoutExpired as e:
                raise ProcessFailed(cmd, -1, f"timed out after {limit}s") from e
            except (FileNotFoundError, PermissionError) as e:
                raise SpawnFailed(program, str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        result = CommandResult(
            command=cmd,
            returncode=proc.returncode,
            stdout=_decode(proc.stdout),
            stderr=_decode(proc.stderr),
            elapsed_ms=elapsed_ms,
        )

        if result.stderr:
            logger.debug("stderr from %s: %s", program, result.stderr[-_TAIL:])

        if proc.returncode != 0:
            raise ProcessFailed(cmd, proc.returncode, result.stderr[-_TAIL:])

        logger.debug("%s finished in %dms", program, elapsed_ms)
        return result


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
