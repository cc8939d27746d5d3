# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Drive the module store across every declared dependency."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import RubedoError
from .logging import fail, info, ok
from .manifest import DependencyDescriptor
from .store import ModuleStore
from .versions import classify, describe

InstallMode = Literal["install", "update"]


class InstallResult(BaseModel):
    """Outcome of an install or update run."""

    model_config = ConfigDict(validate_assignment=True)

    successes: list[str] = Field(default_factory=list)
    failures: list[tuple[str, str]] = Field(default_factory=list)
    cancelled: list[str] = Field(default_factory=list)

    def register_success(self, identity: str) -> None:
        self.successes = [*self.successes, identity]

    def register_failure(self, identity: str, message: str) -> None:
        self.failures = [*self.failures, (identity, message)]

    def register_cancelled(self, identity: str) -> None:
        self.cancelled = [*self.cancelled, identity]

    def exit_code(self) -> int:
        return 1 if self.failures else 0


class DependencyInstaller:
    """Materialise or update dependencies with bounded concurrency.

    Unrelated dependencies run in parallel (the store serialises work per
    path). The first failure stops the run: dependencies that have not
    started yet are cancelled and recorded as such, so a partially installed
    set is never reported as success.
    """

    def __init__(self, store: ModuleStore, *, jobs: int = 4, use_emoji: bool = True) -> None:
        self._store = store
        self._jobs = max(1, jobs)
        self._use_emoji = use_emoji

    def install(self, descriptors: Sequence[DependencyDescriptor]) -> InstallResult:
        return self._run(descriptors, mode="install")

    def update(self, descriptors: Sequence[DependencyDescriptor]) -> InstallResult:
        return self._run(descriptors, mode="update")

    def _run(self, descriptors: Sequence[DependencyDescriptor], *, mode: InstallMode) -> InstallResult:
        result = InstallResult()
        if not descriptors:
            return result
        info(f"Found {len(descriptors)} dependencies:", use_emoji=self._use_emoji)
        for descriptor in descriptors:
            label = describe(classify(descriptor.version), descriptor.local_path)
            info(f"- {descriptor.identity} ({label})", use_emoji=self._use_emoji)

        action = self._action(mode)
        with ThreadPoolExecutor(max_workers=self._jobs, thread_name_prefix="rubedo-store") as executor:
            futures: dict[Future[object], DependencyDescriptor] = {
                executor.submit(action, descriptor): descriptor for descriptor in descriptors
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            if pending and any(future.exception() is not None for future in done):
                for future in pending:
                    future.cancel()
                done, pending = wait(futures)
            for future, descriptor in futures.items():
                self._collect(future, descriptor, result)
        return result

    def _action(self, mode: InstallMode) -> Callable[[DependencyDescriptor], object]:
        return self._store.materialize if mode == "install" else self._store.update

    def _collect(self, future: Future[object], descriptor: DependencyDescriptor, result: InstallResult) -> None:
        if future.cancelled():
            result.register_cancelled(descriptor.identity)
            return
        exc = future.exception()
        if exc is None:
            result.register_success(descriptor.identity)
            return
        if not isinstance(exc, (RubedoError, OSError)):
            raise exc
        fail(f"Error processing {descriptor.identity}: {exc}", use_emoji=self._use_emoji)
        result.register_failure(descriptor.identity, str(exc))


def summarise(result: InstallResult, *, mode: InstallMode, use_emoji: bool) -> None:
    """Print the closing status line for an install or update run."""

    verb = "installed" if mode == "install" else "updated"
    if result.failures:
        fail(
            f"{len(result.failures)} dependency(ies) failed; {len(result.cancelled)} not attempted",
            use_emoji=use_emoji,
        )
        return
    ok(f"All dependencies {verb} successfully!", use_emoji=use_emoji)


__all__ = ["DependencyInstaller", "InstallMode", "InstallResult", "summarise"]
