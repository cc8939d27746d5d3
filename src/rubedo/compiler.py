# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter for the external source bundler."""

from __future__ import annotations

import shutil
from typing import Final, Protocol

from .errors import CompileFailed
from .logging import info, ok
from .process_utils import CommandRunner, describe_command, run_command
from .project import ProjectRoot

SCRIPTS_DIRNAME: Final[str] = "scripts"
SCRIPT_PATTERN: Final[str] = "**/*.js"
_STDERR_TAIL: Final[int] = 20


class SourceCompiler(Protocol):
    """Turn the project's source tree into bundled scripts inside the output."""

    def compile(self) -> None: ...


class NpmScriptCompiler:
    """Run the configured bundler command, then copy ``scripts/**/*.js`` into the output."""

    def __init__(
        self,
        project: ProjectRoot,
        *,
        runner: CommandRunner | None = None,
        use_emoji: bool = True,
    ) -> None:
        self._project = project
        self._runner = runner or run_command
        self._use_emoji = use_emoji

    def compile(self) -> None:
        """Bundle the sources.

        Raises:
            CompileFailed: If the command is missing or exits non-zero.
        """

        command = self._project.config.compile_command
        info("Building source code...", use_emoji=self._use_emoji)
        try:
            completed = self._runner(command, cwd=self._project.path, check=False, capture_output=True)
        except FileNotFoundError as exc:
            raise CompileFailed(str(exc)) from exc
        if completed.returncode != 0:
            stderr = (completed.stderr or completed.stdout or "").strip().splitlines()
            tail = "\n".join(stderr[-_STDERR_TAIL:])
            raise CompileFailed(f"{describe_command(command)} exited with status {completed.returncode}\n{tail}".rstrip())
        copied = self._copy_scripts()
        ok(f"Source code built successfully! ({copied} script(s))", use_emoji=self._use_emoji)

    def _copy_scripts(self) -> int:
        scripts_root = self._project.path / SCRIPTS_DIRNAME
        if not scripts_root.is_dir():
            return 0
        destination_root = self._project.output_dir / SCRIPTS_DIRNAME
        copied = 0
        for script in sorted(scripts_root.glob(SCRIPT_PATTERN)):
            if not script.is_file():
                continue
            destination = destination_root / script.relative_to(scripts_root)
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(script, destination)
            except OSError as exc:
                raise CompileFailed(f"unable to copy {script} to {destination}: {exc}") from exc
            copied += 1
        return copied


__all__ = ["NpmScriptCompiler", "SourceCompiler"]
