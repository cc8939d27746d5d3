# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Sequence staleness check, compile, asset linking and manifest merge."""

from __future__ import annotations

import os
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .assets import AssetLinker
from .compiler import NpmScriptCompiler, SourceCompiler
from .errors import AssetLinkFailed, ConfigError, RubedoError
from .linking import remove_path
from .logging import get_logger, info, ok, warn
from .manifest import DependencyDescriptor, dependencies_of, load_json, parse_manifest
from .merge import ManifestMerger
from .modules import ModuleRecord
from .project import ProjectRoot
from .resolver import VersionResolver
from .store import ModuleStore

LOGGER = get_logger(__name__)

UPDATES_PENDING_EXIT_CODE: Final[int] = 2


class BuildState(Enum):
    IDLE = "idle"
    CHECKING_UPDATES = "checking-updates"
    COMPILING = "compiling"
    LINKING = "linking"
    MERGING = "merging"


class BuildOutcome(BaseModel):
    """Result of one orchestrated build request.

    ``ran`` and a non-empty ``updates_pending`` never occur together: pending
    updates halt the pipeline before anything is written. ``coalesced`` marks
    a request folded into a build that was already running.
    """

    model_config = ConfigDict(frozen=True)

    ran: bool
    updates_pending: list[DependencyDescriptor] = Field(default_factory=list)
    coalesced: bool = False


class _FlightGuard:
    """At most one build per project root, plus at most one queued rerun."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._running = False
        self._rerun = False

    def try_begin(self) -> bool:
        with self._lock:
            if self._running:
                self._rerun = True
                return False
            self._running = True
            return True

    def finish(self) -> bool:
        """Return ``True`` when a rerun was requested; the flight then stays open."""

        with self._lock:
            if self._rerun:
                self._rerun = False
                return True
            self._running = False
            return False

    def abort(self) -> None:
        with self._lock:
            self._running = False
            self._rerun = False


_GUARDS_LOCK = Lock()
_GUARDS: dict[str, _FlightGuard] = {}


def _guard_for(root: Path) -> _FlightGuard:
    key = os.path.normcase(str(root))
    with _GUARDS_LOCK:
        guard = _GUARDS.get(key)
        if guard is None:
            guard = _GUARDS[key] = _FlightGuard()
        return guard


class BuildOrchestrator:
    """Run the build pipeline for one project root.

    State machine: ``IDLE -> CHECKING_UPDATES -> COMPILING -> LINKING ->
    MERGING -> IDLE``, or ``CHECKING_UPDATES -> IDLE`` when updates are
    pending. A failing stage raises and later stages do not run; a rerun
    queued during a failing build still runs, and only the last attempt's
    error reaches the caller.
    """

    def __init__(
        self,
        project: ProjectRoot,
        *,
        store: ModuleStore | None = None,
        resolver: VersionResolver | None = None,
        compiler: SourceCompiler | None = None,
        linker: AssetLinker | None = None,
        merger: ManifestMerger | None = None,
        use_emoji: bool = True,
    ) -> None:
        self.project = project
        self._resolver = resolver or (store.resolver if store is not None else VersionResolver())
        self._store = store or ModuleStore(project, resolver=self._resolver, use_emoji=use_emoji)
        self._compiler = compiler or NpmScriptCompiler(project, use_emoji=use_emoji)
        self._linker = linker or AssetLinker(project, use_emoji=use_emoji)
        self._merger = merger or ManifestMerger(project, use_emoji=use_emoji)
        self._use_emoji = use_emoji
        self.state = BuildState.IDLE
        self.transitions: list[BuildState] = []

    def run(self, *, skip_update_check: bool = False) -> BuildOutcome:
        """Build once, or queue one rerun when a build for this root is in flight.

        Args:
            skip_update_check: Build even when dependencies are stale.

        Returns:
            BuildOutcome: What happened to this request.

        Raises:
            RubedoError: If any stage fails.
        """

        guard = _guard_for(self.project.path)
        if not guard.try_begin():
            info("Build already running; one more build will follow it.", use_emoji=self._use_emoji)
            return BuildOutcome(ran=False, coalesced=True)
        while True:
            try:
                outcome = self._run_once(skip_update_check=skip_update_check)
            except RubedoError as exc:
                if not guard.finish():
                    raise
                warn(f"Build failed, running the queued rebuild: {exc}", use_emoji=self._use_emoji)
                continue
            except BaseException:
                guard.abort()
                raise
            if not guard.finish():
                return outcome

    def _enter(self, state: BuildState) -> None:
        LOGGER.debug("build state %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    def _run_once(self, *, skip_update_check: bool) -> BuildOutcome:
        try:
            self._enter(BuildState.CHECKING_UPDATES)
            host = load_json(self.project.manifest_path)
            descriptors = dependencies_of(parse_manifest(host, source=str(self.project.manifest_path)))
            modules = self._store.records(descriptors)
            if not skip_update_check:
                pending = self.pending_updates(modules)
                if pending:
                    return BuildOutcome(ran=False, updates_pending=pending)

            self._reset_output()
            self._enter(BuildState.COMPILING)
            self._compiler.compile()
            self._enter(BuildState.LINKING)
            self._linker.link_assets(modules)
            self._linker.link_project_assets()
            self._enter(BuildState.MERGING)
            self._merger.merge_into_output(host, modules)
        finally:
            self._enter(BuildState.IDLE)
        ok("Addon built successfully!", use_emoji=self._use_emoji)
        return BuildOutcome(ran=True)

    def pending_updates(self, modules: Sequence[ModuleRecord]) -> list[DependencyDescriptor]:
        """Return descriptors whose local revision is not what they declare."""

        return [module.descriptor for module in modules if self._resolver.is_stale(module)]

    def _reset_output(self) -> None:
        output = self.project.output_dir.resolve()
        protected = (self.project.path, self.project.store_root.resolve())
        if any(output == path or output in path.parents for path in protected):
            raise ConfigError(f"output directory {output} would overwrite the project or module store")
        try:
            remove_path(output)
            output.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise AssetLinkFailed(f"unable to reset output directory {output}: {exc}") from exc


def updates_available_message(pending: Sequence[DependencyDescriptor], command: str) -> list[str]:
    """Return the lines explaining which dependencies are behind and how to proceed."""

    lines = ["Some dependencies have updates available:"]
    lines.extend(f"  - {descriptor.identity} ({descriptor.version})" for descriptor in pending)
    lines.append("It is recommended to run `rubedo install` to update these dependencies.")
    lines.append(f"You can also run `rubedo {command} --skip-update-check` to skip this check.")
    return lines


def report_pending_updates(
    pending: Sequence[DependencyDescriptor],
    *,
    command: str,
    use_emoji: bool,
) -> None:
    headline, *details = updates_available_message(pending, command)
    warn(headline, use_emoji=use_emoji)
    for line in details:
        info(line, use_emoji=False)


__all__ = [
    "BuildOrchestrator",
    "BuildOutcome",
    "BuildState",
    "UPDATES_PENDING_EXIT_CODE",
    "report_pending_updates",
    "updates_available_message",
]
