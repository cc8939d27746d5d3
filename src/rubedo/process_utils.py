# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free wrappers around ``subprocess`` for git and the external build tools."""

from __future__ import annotations

import shlex
import shutil

# Bandit: commands are assembled from argument lists, never through a shell.
import subprocess  # nosec B404
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess

from .logging import get_logger

LOGGER = get_logger(__name__)

CommandRunner = Callable[..., CompletedProcess[str]]


class SubprocessExecutionError(RuntimeError):
    """Raised when a command exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        detail = (stderr or "").strip() or "<none>"
        super().__init__(f"Command '{describe_command(command)}' exited with status {returncode}. stderr: {detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def describe_command(args: Sequence[str]) -> str:
    """Return ``args`` joined for display in status lines."""

    return shlex.join(str(arg) for arg in args)


def _resolve_executable(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    timeout: float | None = None,
) -> CompletedProcess[str]:
    """Execute *args* after resolving the executable on ``PATH``.

    Args:
        args: Command and arguments; the first entry is looked up on ``PATH``.
        cwd: Working directory for the child process.
        env: Complete environment for the child, ``None`` inherits ours.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        capture_output: Capture stdout/stderr as text instead of inheriting.
        timeout: Seconds before the child is killed; reported as exit 124.

    Returns:
        CompletedProcess[str]: Completed process with text output.

    Raises:
        SubprocessExecutionError: If ``check`` is set and the command fails.
        FileNotFoundError: If the executable cannot be located.
    """

    normalized = _resolve_executable([str(arg) for arg in args])
    LOGGER.debug("run %s (cwd=%s)", describe_command(args), cwd)
    try:
        # Bandit: argument vector only, shell disabled.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            check=False,
            capture_output=capture_output,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = exc.stdout.decode(errors="ignore") if isinstance(exc.stdout, bytes) else exc.stdout
        completed = CompletedProcess(
            args=normalized,
            returncode=124,
            stdout=stdout or "",
            stderr=f"Command timed out after {timeout:.1f}s",
        )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            args,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


__all__ = ["CommandRunner", "SubprocessExecutionError", "describe_command", "run_command"]
