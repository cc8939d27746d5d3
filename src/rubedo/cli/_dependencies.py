# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared workflow behind ``rubedo install`` and ``rubedo update``."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer

from ..errors import ConfigError
from ..installs import DependencyInstaller, InstallMode, InstallResult, summarise
from ..logging import info
from ..manifest import dependencies_of, read_manifest
from ..project import ProjectRoot
from ..store import ModuleStore
from .shared import command_errors, load_project, prepare_logging

StoreFactory = Callable[[ProjectRoot, bool], ModuleStore]


def _default_store(project: ProjectRoot, use_emoji: bool) -> ModuleStore:
    return ModuleStore(project, use_emoji=use_emoji)


def run_dependency_workflow(
    *,
    root: Path,
    jobs: int | None,
    use_emoji: bool,
    verbose: bool,
    mode: InstallMode,
    store_factory: StoreFactory = _default_store,
) -> InstallResult:
    """Install or update every dependency declared by the project at ``root``.

    Raises:
        typer.Exit: With status 1 when the manifest is unusable or any
            dependency fails.
    """

    prepare_logging(verbose)
    project = load_project(root, use_emoji=use_emoji)
    heading = "Installing dependencies..." if mode == "install" else "Updating dependencies..."
    info(heading, use_emoji=use_emoji)

    prefix = "Error installing dependencies" if mode == "install" else "Error updating dependencies"
    with command_errors(use_emoji=use_emoji, prefix=prefix):
        if mode == "install":
            try:
                project.store_root.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"cannot create module store {project.store_root}: {exc}") from exc
        descriptors = dependencies_of(read_manifest(project))

    if not descriptors:
        info("No dependencies found in manifest.json", use_emoji=use_emoji)
        return InstallResult()

    installer = DependencyInstaller(
        store_factory(project, use_emoji),
        jobs=jobs or project.config.jobs,
        use_emoji=use_emoji,
    )
    result = installer.install(descriptors) if mode == "install" else installer.update(descriptors)
    summarise(result, mode=mode, use_emoji=use_emoji)
    if result.exit_code():
        raise typer.Exit(code=result.exit_code())
    return result


__all__ = ["StoreFactory", "run_dependency_workflow"]
