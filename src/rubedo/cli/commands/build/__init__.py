# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build CLI command package."""

from __future__ import annotations

import typer

from .command import build_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Attach the ``build`` command to ``app``."""

    app.command("build")(build_command)
