# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers shared by the test modules."""

from __future__ import annotations

import json
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Any

import pytest

from rubedo.manifest import DependencyDescriptor

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def write_host_manifest(root: Path, dependencies: Sequence[dict[str, Any]] = (), **extra: Any) -> Path:
    manifest: dict[str, Any] = {
        "format_version": 2,
        "header": {"name": "demo", "uuid": "00000000-0000-0000-0000-000000000001", "version": [1, 0, 0]},
        "modules": [{"type": "data", "uuid": "00000000-0000-0000-0000-000000000002", "version": [1, 0, 0]}],
        "rubedo_dependencies": list(dependencies),
    }
    manifest.update(extra)
    path = root / "manifest.json"
    path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return path


def descriptor(identity: str, version: str = "latest", local_path: str | None = None) -> DependencyDescriptor:
    return DependencyDescriptor(module_name=identity, version=version, local_path=local_path)


def make_checkout(path: Path) -> Path:
    """Create a directory that looks like a git checkout."""

    (path / ".git").mkdir(parents=True, exist_ok=True)
    return path


def completed(args: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = "") -> CompletedProcess[str]:
    return CompletedProcess(args=list(args), returncode=returncode, stdout=stdout, stderr=stderr)


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)
    return result.stdout.strip()


class FakeRepository:
    """Stand-in for :class:`rubedo.git.GitRepository` driven by plain attributes."""

    def __init__(
        self,
        path: Path,
        identity: str | None = None,
        *,
        head: str = "a" * 40,
        branch: str | None = "main",
        default: str | None = "main",
        behind: int = 0,
        tags: dict[str, str] | None = None,
        dirty: bool = False,
    ) -> None:
        self.path = path
        self.identity = identity
        self.head = head
        self.branch = branch
        self.default = default
        self.behind = behind
        self.tags = dict(tags or {})
        self.dirty = dirty
        self.calls: list[tuple[str, ...]] = []

    def clone(self, url: str) -> None:
        self.calls.append(("clone", url))
        make_checkout(self.path)

    def fetch(self) -> None:
        self.calls.append(("fetch",))

    def checkout(self, ref: str) -> None:
        self.calls.append(("checkout", ref))
        if ref.startswith("tags/"):
            self.head = self.tags[ref.removeprefix("tags/")]
            self.branch = None
        elif ref in {self.default, "feature"}:
            self.branch = ref
        else:
            self.head = ref
            self.branch = None

    def pull(self, branch: str) -> None:
        self.calls.append(("pull", branch))
        self.behind = 0

    def head_commit(self) -> str:
        return self.head

    def current_branch(self) -> str | None:
        return self.branch

    def default_branch(self) -> str | None:
        return self.default

    def commits_behind_upstream(self) -> int:
        return self.behind

    def tag_commits(self) -> dict[str, str]:
        return dict(self.tags)

    def is_dirty(self) -> bool:
        return self.dirty
