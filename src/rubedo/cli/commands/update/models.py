# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data structures for the ``rubedo update`` command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class UpdateOptions:
    """Normalised CLI inputs for the update workflow."""

    root: Path
    jobs: int | None
    use_emoji: bool
    verbose: bool


def build_update_options(root: Path, jobs: int | None, emoji: bool, verbose: bool) -> UpdateOptions:
    return UpdateOptions(root=root.resolve(), jobs=jobs, use_emoji=emoji, verbose=verbose)


__all__ = ["UpdateOptions", "build_update_options"]
