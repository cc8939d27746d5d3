# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data structures for the ``rubedo watch`` command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class WatchOptions:
    """Normalised CLI inputs for the watch workflow."""

    root: Path
    skip_update_check: bool
    use_emoji: bool
    verbose: bool


def build_watch_options(root: Path, skip_update_check: bool, emoji: bool, verbose: bool) -> WatchOptions:
    return WatchOptions(
        root=root.resolve(),
        skip_update_check=skip_update_check,
        use_emoji=emoji,
        verbose=verbose,
    )


__all__ = ["WatchOptions", "build_watch_options"]
