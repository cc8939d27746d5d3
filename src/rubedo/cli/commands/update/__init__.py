# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Update CLI command package."""

from __future__ import annotations

import typer

from .command import update_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Attach the ``update`` command to ``app``."""

    app.command("update")(update_command)
