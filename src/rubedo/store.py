# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Materialise dependencies under the module store and keep them current."""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Final

from .errors import CheckoutFailed
from .git import is_git_checkout
from .linking import Linker, remove_path
from .logging import get_logger, info, ok, warn
from .manifest import DependencyDescriptor
from .modules import ModuleRecord, module_record
from .process_utils import CommandRunner, describe_command, run_command
from .project import ProjectRoot
from .resolver import VersionResolver
from .versions import describe

LOGGER = get_logger(__name__)

PACKAGE_MANIFEST: Final[str] = "package.json"


class PathLockRegistry:
    """Hand out one lock per resolved path so work on a module is serialised."""

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[str, Lock] = {}

    def lock_for(self, path: Path) -> Lock:
        key = os.path.normcase(os.path.abspath(path))
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = Lock()
            return lock

    @contextmanager
    def hold(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield


_STORE_LOCKS: Final[PathLockRegistry] = PathLockRegistry()


class ModuleStore:
    """Map dependencies to ``<store-root>/<owner>/<name>`` and materialise them there.

    Overrides become links to the override directory; everything else is a
    full git clone moved to its declared revision by the
    :class:`VersionResolver`. Each store path is guarded by a lock for the
    whole duration of :meth:`materialize` or :meth:`update`.
    """

    def __init__(
        self,
        project: ProjectRoot,
        *,
        resolver: VersionResolver | None = None,
        linker: Linker | None = None,
        runner: CommandRunner | None = None,
        locks: PathLockRegistry | None = None,
        use_emoji: bool = True,
    ) -> None:
        self.project = project
        self.resolver = resolver or VersionResolver()
        self._linker = linker or Linker(use_emoji=use_emoji)
        self._runner = runner or run_command
        self._locks = locks or _STORE_LOCKS
        self._use_emoji = use_emoji

    def record(self, descriptor: DependencyDescriptor) -> ModuleRecord:
        return module_record(self.project, descriptor)

    def records(self, descriptors: Sequence[DependencyDescriptor]) -> list[ModuleRecord]:
        return [self.record(descriptor) for descriptor in descriptors]

    def materialize(self, descriptor: DependencyDescriptor) -> Path:
        """Create the module on first sight, otherwise bring it to its declared version.

        Returns:
            Path: The module's store path.

        Raises:
            ResolutionError: If cloning, linking or checkout fails.
        """

        module = self.record(descriptor)
        with self._locks.hold(module.local_path):
            if module.is_linked:
                self._link(module, refresh_install=False)
            elif is_git_checkout(module.local_path):
                info(f"Repository {module.identity} already exists, updating...", use_emoji=self._use_emoji)
                self._checkout(module)
            else:
                self._clone(module)
        return module.local_path

    def update(self, descriptor: DependencyDescriptor) -> None:
        """Re-resolve an existing module, cloning it when it is missing.

        Raises:
            ResolutionError: If cloning, linking or checkout fails.
        """

        module = self.record(descriptor)
        with self._locks.hold(module.local_path):
            if module.is_linked:
                self._link(module, refresh_install=True)
            elif is_git_checkout(module.local_path):
                info(f"Updating {module.identity}...", use_emoji=self._use_emoji)
                self._checkout(module)
            else:
                self._clone(module)

    def _clone(self, module: ModuleRecord) -> None:
        path = module.local_path
        if os.path.lexists(path):
            warn(
                f"{path} is not a git checkout (stale link or copy), replacing it with a fresh clone",
                use_emoji=self._use_emoji,
            )
            remove_path(path)
        info(f"Cloning {module.identity}...", use_emoji=self._use_emoji)
        self.resolver.repository(module).clone(self.project.config.remote_url(module.identity))
        self._checkout(module)

    def _checkout(self, module: ModuleRecord) -> None:
        label = describe(module.variant)
        info(f"Checking out {label}...", use_emoji=self._use_emoji)
        self.resolver.checkout(module)
        if self.project.store_is_external():
            self._install_nested(module, module.local_path)
        ok(f"Repository {module.identity} at {label}", use_emoji=self._use_emoji)

    def _link(self, module: ModuleRecord, *, refresh_install: bool) -> None:
        target = module.descriptor.override_path(self.project)
        if target is None:
            raise CheckoutFailed("no local path declared", identity=module.identity)
        if not target.is_dir():
            raise CheckoutFailed(f"Local path does not exist: {target}", identity=module.identity)
        if os.path.realpath(target) == os.path.realpath(module.local_path) and not os.path.islink(module.local_path):
            info("Source and destination are the same, skipping link.", use_emoji=self._use_emoji)
        elif self._linker.is_linked_to(module.local_path, target):
            LOGGER.debug("%s: already linked to %s", module.identity, target)
        else:
            method = self._linker.link(module.local_path, target, identity=module.identity)
            ok(f"Repository {module.identity} linked from {target} ({method.value})", use_emoji=self._use_emoji)
        if refresh_install and not self._within_project(target):
            self._install_nested(module, target)

    def _within_project(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.project.path)
        except ValueError:
            return False
        return True

    def _install_nested(self, module: ModuleRecord, directory: Path) -> None:
        """Install a module's own package dependencies with the configured command."""

        if not (directory / PACKAGE_MANIFEST).is_file():
            return
        command = self.project.config.install_command
        info(f"Running {describe_command(command)} in {directory}...", use_emoji=self._use_emoji)
        try:
            completed = self._runner(command, cwd=directory, check=False)
        except FileNotFoundError as exc:
            raise CheckoutFailed(str(exc), identity=module.identity) from exc
        if completed.returncode != 0:
            raise CheckoutFailed(
                f"{describe_command(command)} failed with exit code {completed.returncode}",
                identity=module.identity,
            )


__all__ = ["ModuleStore", "PathLockRegistry"]
