# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data structures for the ``rubedo install`` command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class InstallOptions:
    """Normalised CLI inputs for the install workflow."""

    root: Path
    jobs: int | None
    use_emoji: bool
    verbose: bool


def build_install_options(root: Path, jobs: int | None, emoji: bool, verbose: bool) -> InstallOptions:
    return InstallOptions(root=root.resolve(), jobs=jobs, use_emoji=emoji, verbose=verbose)


__all__ = ["InstallOptions", "build_install_options"]
