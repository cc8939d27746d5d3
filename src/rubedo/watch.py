# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rebuild on filesystem changes.

Watchdog observer threads only push :class:`ChangeEvent` items into a queue.
A single consumer drains that queue, folds each debounced burst through
:class:`WatchState` and runs builds itself, so there is never more than one
build in flight and never more than one rebuild pending. Watches stay
scheduled while building; changes seen then are folded into one rebuild.
"""

from __future__ import annotations

import math
import os
import queue
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .assets import ASSET_CATEGORIES
from .errors import RubedoError
from .logging import fail, get_logger, info, ok
from .project import ProjectRoot

LOGGER = get_logger(__name__)

QUALIFYING_EVENTS: Final[frozenset[str]] = frozenset({"created", "modified", "deleted", "moved"})
IGNORED_SEGMENTS: Final[frozenset[str]] = frozenset({"node_modules"})
_POLL_INTERVAL: Final[float] = 0.5
# inotify holds events back up to half a second to pair moves.
_DELIVERY_GRACE: Final[float] = 0.6


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    kind: str
    path: str


class WatchDecision(Enum):
    START = "start"
    COALESCE = "coalesce"
    IGNORE = "ignore"


@dataclass(slots=True)
class WatchState:
    """Reducer over incoming change bursts.

    Attributes:
        cooldown: Seconds after a finished build during which changes are
            ignored; this swallows the build's own writes.
        building: Whether a build is running.
        rebuild_requested: Set by changes seen while building; consumed once.
        last_build: Monotonic time the last build finished.
    """

    cooldown: float
    building: bool = False
    rebuild_requested: bool = False
    last_build: float = field(default=-math.inf)

    def reduce(self, now: float) -> WatchDecision:
        if self.building:
            self.rebuild_requested = True
            return WatchDecision.COALESCE
        if now - self.last_build < self.cooldown:
            return WatchDecision.IGNORE
        return WatchDecision.START

    def begin(self) -> None:
        self.building = True

    def finish(self, now: float) -> bool:
        """Mark the build finished; return and clear the pending rebuild flag."""

        self.building = False
        self.last_build = max(self.last_build, now)
        requested = self.rebuild_requested
        self.rebuild_requested = False
        return requested


class ObserverLike(Protocol):
    def schedule(self, event_handler: FileSystemEventHandler, path: str, *, recursive: bool = False) -> object: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def join(self, timeout: float | None = None) -> None: ...


def watch_roots(project: ProjectRoot) -> list[Path]:
    """Return the existing roots to observe: sources, asset categories, manifest, module store."""

    candidates = [
        project.source_dir,
        *(project.path / category for category in ASSET_CATEGORIES),
        project.manifest_path,
        project.store_root,
    ]
    return [path for path in candidates if path.exists()]


class _QueueingHandler(FileSystemEventHandler):
    def __init__(self, watcher: ChangeWatcher) -> None:
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in QUALIFYING_EVENTS:
            return
        candidates = [event.src_path, getattr(event, "dest_path", "")]
        for raw in candidates:
            path = os.fsdecode(raw)
            if path and self._watcher.accepts(path):
                self._watcher.submit(ChangeEvent(kind=event.event_type, path=path))
                return


class ChangeWatcher:
    """Debounce filesystem changes into orchestrated rebuilds.

    Args:
        project: Project whose roots are observed.
        build: Callable running one build; :class:`RubedoError` is reported
            and the watcher keeps going.
        cooldown: Seconds after a build during which changes are ignored.
        debounce: Quiet period that ends a burst of changes.
        clock: Monotonic clock, replaceable in tests.
        observer_factory: Factory for watchdog observers.
        use_emoji: Whether status output includes emoji glyphs.
    """

    def __init__(
        self,
        project: ProjectRoot,
        build: Callable[[], object],
        *,
        cooldown: float | None = None,
        debounce: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        observer_factory: Callable[[], ObserverLike] = Observer,
        use_emoji: bool = True,
    ) -> None:
        self._project = project
        self._build = build
        self._debounce = project.config.watch.debounce_seconds if debounce is None else debounce
        self.state = WatchState(cooldown=project.config.watch.cooldown_seconds if cooldown is None else cooldown)
        self._clock = clock
        self._observer_factory = observer_factory
        self._observer: ObserverLike | None = None
        self._events: queue.Queue[ChangeEvent] = queue.Queue()
        self._handler = _QueueingHandler(self)
        self._roots: list[Path] = []
        self._use_emoji = use_emoji
        self.builds_run = 0

    def submit(self, event: ChangeEvent) -> None:
        """Queue ``event``; safe to call from observer threads."""

        self._events.put(event)

    def accepts(self, path: str) -> bool:
        """Return ``True`` for paths that should trigger a rebuild."""

        candidate = Path(path)
        if candidate == self._project.manifest_path:
            return True
        for root in self._roots:
            if root == self._project.manifest_path or not candidate.is_relative_to(root):
                continue
            parts = candidate.relative_to(root).parts
            return not any(part.startswith(".") or part in IGNORED_SEGMENTS for part in parts)
        return False

    def start(self) -> None:
        """Create the observer and schedule every existing root."""

        self._roots = watch_roots(self._project)
        info("Watching the following paths:", use_emoji=self._use_emoji)
        for display in format_roots(self._roots, self._project.path):
            info(f" - {display}", use_emoji=False)
        self._observer = self._observer_factory()
        for root in self._roots:
            if root.is_dir():
                self._observer.schedule(self._handler, str(root), recursive=True)
            else:
                self._observer.schedule(self._handler, str(root.parent), recursive=False)
        self._observer.start()

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None

    def _drain(self, *, wait: float) -> list[ChangeEvent]:
        """Collect queued events until none arrives for ``wait`` seconds."""

        events: list[ChangeEvent] = []
        while True:
            try:
                events.append(self._events.get(timeout=wait))
            except queue.Empty:
                return events

    def run_once(self, timeout: float | None = None) -> int:
        """Process one debounced burst of changes.

        Args:
            timeout: Seconds to wait for the first change, ``None`` blocks.

        Returns:
            int: Number of builds run (0, 1, or more when rebuilds were coalesced).
        """

        try:
            first = self._events.get(timeout=timeout)
        except queue.Empty:
            return 0
        burst = [first, *self._drain(wait=self._debounce)]
        for event in burst:
            LOGGER.debug("change detected (%s): %s", event.kind, event.path)
        decision = self.state.reduce(self._clock())
        if decision is WatchDecision.IGNORE:
            info("Skipping rebuild: too soon after last build", use_emoji=self._use_emoji)
            return 0
        info(f"Change detected ({first.kind}): {first.path}", use_emoji=self._use_emoji)
        return self._execute()

    def _execute(self) -> int:
        builds = 0
        while True:
            self.state.begin()
            try:
                info("Rebuilding...", use_emoji=self._use_emoji)
                self._build()
                ok("Rebuild completed, watching for changes...", use_emoji=self._use_emoji)
            except RubedoError as exc:
                fail(f"Error rebuilding addon: {exc}", use_emoji=self._use_emoji)
            finally:
                for _ in self._drain(wait=max(self._debounce, _DELIVERY_GRACE)):
                    self.state.reduce(self._clock())
                requested = self.state.finish(self._clock())
                builds += 1
                self.builds_run += 1
            if not requested:
                return builds
            info("Changes arrived during the build, rebuilding once more...", use_emoji=self._use_emoji)

    def run_forever(self, stop: threading.Event, *, initial_build: bool = True) -> None:
        """Observe and rebuild until ``stop`` is set, optionally building once first."""

        self.start()
        try:
            if initial_build:
                self._execute()
            ok("Watching for changes, press Ctrl+C to stop", use_emoji=self._use_emoji)
            while not stop.is_set():
                self.run_once(timeout=_POLL_INTERVAL)
        finally:
            self.stop()


def format_roots(roots: Iterable[Path], base: Path) -> list[str]:
    """Return ``roots`` relative to ``base`` where possible, for display."""

    formatted: list[str] = []
    for root in roots:
        try:
            formatted.append(str(root.relative_to(base)) or ".")
        except ValueError:
            formatted.append(str(root))
    return formatted


__all__ = [
    "ChangeEvent",
    "ChangeWatcher",
    "WatchDecision",
    "WatchState",
    "format_roots",
    "watch_roots",
]
