# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Thin wrapper over the ``git`` executable for a single module checkout."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from .errors import CheckoutFailed, RemoteUnreachable, ResolutionError
from .logging import get_logger
from .process_utils import CommandRunner, run_command

LOGGER = get_logger(__name__)

GIT_EXECUTABLE: Final[str] = "git"
GIT_METADATA_DIR: Final[str] = ".git"
REMOTE_NAME: Final[str] = "origin"
_REMOTE_HEAD_REF: Final[str] = f"refs/remotes/{REMOTE_NAME}/HEAD"
_TAG_FORMAT: Final[str] = "%(refname:short) %(objectname) %(*objectname)"


def _default_runner(args: Sequence[str], *, cwd: Path | None) -> CompletedProcess[str]:
    return run_command(args, cwd=cwd, check=False, capture_output=True)


def is_git_checkout(path: Path) -> bool:
    """Return ``True`` when ``path`` is a real directory holding a git checkout."""

    return path.is_dir() and not path.is_symlink() and (path / GIT_METADATA_DIR).exists()


class GitRepository:
    """Run git commands against the checkout at ``path``.

    Network-facing commands (clone, fetch) raise :class:`RemoteUnreachable`;
    commands that move the working tree raise :class:`CheckoutFailed`.
    """

    def __init__(
        self,
        path: Path,
        *,
        identity: str | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.path = path
        self.identity = identity
        self._runner = runner or _default_runner

    def _run(self, args: Sequence[str], *, cwd: Path | None = None) -> CompletedProcess[str]:
        try:
            return self._runner([GIT_EXECUTABLE, *args], cwd=cwd or self.path)
        except FileNotFoundError as exc:
            raise ResolutionError("git executable not found on PATH", identity=self.identity) from exc

    def _checked(
        self,
        args: Sequence[str],
        error: type[ResolutionError],
        *,
        cwd: Path | None = None,
    ) -> str:
        completed = self._run(args, cwd=cwd)
        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout or "").strip() or f"exit code {completed.returncode}"
            raise error(f"git {' '.join(args)} failed: {detail}", identity=self.identity)
        return (completed.stdout or "").strip()

    def _optional(self, args: Sequence[str]) -> str | None:
        completed = self._run(args)
        if completed.returncode != 0:
            return None
        return (completed.stdout or "").strip()

    def clone(self, url: str) -> None:
        """Clone ``url`` into :attr:`path` with full history."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._checked(["clone", "--quiet", url, str(self.path)], RemoteUnreachable, cwd=self.path.parent)

    def fetch(self) -> None:
        self._checked(["fetch", "--quiet", "--tags", "--force", REMOTE_NAME], RemoteUnreachable)

    def checkout(self, ref: str) -> None:
        self._checked(["checkout", "--quiet", ref], CheckoutFailed)

    def pull(self, branch: str) -> None:
        """Fast-forward ``branch`` from the remote; diverged history fails."""

        self._checked(["pull", "--quiet", "--ff-only", REMOTE_NAME, branch], CheckoutFailed)

    def head_commit(self) -> str:
        return self._checked(["rev-parse", "HEAD"], CheckoutFailed)

    def current_branch(self) -> str | None:
        """Return the checked-out branch name, ``None`` when HEAD is detached."""

        return self._optional(["symbolic-ref", "--quiet", "--short", "HEAD"]) or None

    def default_branch(self) -> str | None:
        """Return the remote's default branch as recorded at clone time."""

        remote_head = self._optional(["symbolic-ref", "--quiet", "--short", _REMOTE_HEAD_REF])
        if not remote_head:
            return None
        prefix = f"{REMOTE_NAME}/"
        return remote_head[len(prefix) :] if remote_head.startswith(prefix) else remote_head

    def commits_behind_upstream(self) -> int:
        """Return how many upstream commits HEAD lacks; ``0`` without an upstream."""

        count = self._optional(["rev-list", "--count", "HEAD..@{upstream}"])
        if count is None:
            LOGGER.debug("%s: no upstream configured for %s", self.identity, self.path)
            return 0
        try:
            return int(count)
        except ValueError:
            return 0

    def tag_commits(self) -> dict[str, str]:
        """Map each tag name to the commit it points at.

        Annotated tags are peeled to their target commit; lightweight tags
        already name the commit directly.
        """

        output = self._checked(["for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags"], CheckoutFailed)
        tags: dict[str, str] = {}
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            name, obj = parts[0], parts[1]
            peeled = parts[2] if len(parts) > 2 else ""
            tags[name] = peeled or obj
        return tags

    def is_dirty(self) -> bool:
        """Return ``True`` when tracked files carry uncommitted changes."""

        status = self._checked(["status", "--porcelain", "--untracked-files=no"], CheckoutFailed)
        return bool(status)


__all__ = ["GIT_METADATA_DIR", "GitRepository", "is_git_checkout"]
