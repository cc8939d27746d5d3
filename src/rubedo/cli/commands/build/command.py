# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``rubedo build`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from ....build import UPDATES_PENDING_EXIT_CODE, BuildOrchestrator, report_pending_updates
from ....logging import info
from ...shared import (
    EMOJI_OPTION,
    ROOT_OPTION,
    SKIP_UPDATE_CHECK_OPTION,
    VERBOSE_OPTION,
    command_errors,
    load_project,
    prepare_logging,
)
from .models import build_build_options


def build_command(
    root: ROOT_OPTION = Path("."),
    skip_update_check: SKIP_UPDATE_CHECK_OPTION = False,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Compile the addon and link dependency assets into the output directory."""

    options = build_build_options(root, skip_update_check, emoji, verbose)
    prepare_logging(options.verbose)
    project = load_project(options.root, use_emoji=options.use_emoji)
    info("Building addon...", use_emoji=options.use_emoji)

    orchestrator = BuildOrchestrator(project, use_emoji=options.use_emoji)
    with command_errors(use_emoji=options.use_emoji, prefix="Error building addon"):
        outcome = orchestrator.run(skip_update_check=options.skip_update_check)

    if outcome.updates_pending:
        report_pending_updates(outcome.updates_pending, command="build", use_emoji=options.use_emoji)
        raise typer.Exit(code=UPDATES_PENDING_EXIT_CODE)


__all__ = ["build_command"]
