# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest
from support import write_host_manifest

from rubedo.config import RubedoConfig
from rubedo.console import reset_consoles
from rubedo.project import ProjectRoot

ProjectFactory = Callable[..., ProjectRoot]


@pytest.fixture(autouse=True)
def _fresh_consoles() -> Iterator[None]:
    reset_consoles()
    yield
    reset_consoles()


@pytest.fixture
def project_factory(tmp_path: Path) -> ProjectFactory:
    """Return a factory writing ``manifest.json`` and building a :class:`ProjectRoot`."""

    def factory(dependencies: Sequence[dict[str, Any]] = (), **config: Any) -> ProjectRoot:
        root = (tmp_path / "project").resolve()
        root.mkdir(parents=True, exist_ok=True)
        write_host_manifest(root, dependencies)
        return ProjectRoot(path=root, config=RubedoConfig(**config))

    return factory


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from user configuration and give commits an identity."""

    global_config = tmp_path / "gitconfig"
    global_config.write_text("", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Rubedo Tests")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "tests@example.invalid")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Rubedo Tests")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "tests@example.invalid")
