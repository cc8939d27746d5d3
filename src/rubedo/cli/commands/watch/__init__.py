# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Watch CLI command package."""

from __future__ import annotations

import typer

from .command import watch_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Attach the ``watch`` command to ``app``."""

    app.command("watch")(watch_command)
