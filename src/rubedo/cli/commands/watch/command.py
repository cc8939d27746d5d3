# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``rubedo watch`` command."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

from ....build import BuildOrchestrator, BuildOutcome, report_pending_updates
from ....logging import info
from ....project import ProjectRoot
from ....watch import ChangeWatcher
from ...shared import (
    EMOJI_OPTION,
    ROOT_OPTION,
    SKIP_UPDATE_CHECK_OPTION,
    VERBOSE_OPTION,
    load_project,
    prepare_logging,
)
from .models import WatchOptions, build_watch_options


def _build_callback(project: ProjectRoot, options: WatchOptions) -> Callable[[], BuildOutcome]:
    orchestrator = BuildOrchestrator(project, use_emoji=options.use_emoji)

    def build_once() -> BuildOutcome:
        outcome = orchestrator.run(skip_update_check=options.skip_update_check)
        if outcome.updates_pending:
            report_pending_updates(outcome.updates_pending, command="watch", use_emoji=options.use_emoji)
        return outcome

    return build_once


def create_watcher(project: ProjectRoot, options: WatchOptions) -> ChangeWatcher:
    return ChangeWatcher(project, _build_callback(project, options), use_emoji=options.use_emoji)


def watch_command(
    root: ROOT_OPTION = Path("."),
    skip_update_check: SKIP_UPDATE_CHECK_OPTION = False,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Build once, then rebuild whenever sources, assets or dependencies change."""

    options = build_watch_options(root, skip_update_check, emoji, verbose)
    prepare_logging(options.verbose)
    project = load_project(options.root, use_emoji=options.use_emoji)
    info("Watching for changes...", use_emoji=options.use_emoji)

    watcher = create_watcher(project, options)
    stop = threading.Event()
    try:
        watcher.run_forever(stop)
    except KeyboardInterrupt:
        stop.set()
        info("Stopped watching.", use_emoji=options.use_emoji)


__all__ = ["create_watcher", "watch_command"]
