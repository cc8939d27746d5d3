# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data structures for the ``rubedo build`` command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class BuildOptions:
    """Normalised CLI inputs for the build workflow."""

    root: Path
    skip_update_check: bool
    use_emoji: bool
    verbose: bool


def build_build_options(root: Path, skip_update_check: bool, emoji: bool, verbose: bool) -> BuildOptions:
    return BuildOptions(
        root=root.resolve(),
        skip_update_check=skip_update_check,
        use_emoji=emoji,
        verbose=verbose,
    )


__all__ = ["BuildOptions", "build_build_options"]
