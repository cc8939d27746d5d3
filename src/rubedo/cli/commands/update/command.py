# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``rubedo update`` command."""

from __future__ import annotations

from pathlib import Path

from ..._dependencies import run_dependency_workflow
from ...shared import EMOJI_OPTION, JOBS_OPTION, ROOT_OPTION, VERBOSE_OPTION
from .models import build_update_options


def update_command(
    root: ROOT_OPTION = Path("."),
    jobs: JOBS_OPTION = None,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Move every installed dependency to the revision its manifest entry selects."""

    options = build_update_options(root, jobs, emoji, verbose)
    run_dependency_workflow(
        root=options.root,
        jobs=options.jobs,
        use_emoji=options.use_emoji,
        verbose=options.verbose,
        mode="update",
    )


__all__ = ["update_command"]
