# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Install CLI command package."""

from __future__ import annotations

import typer

from .command import install_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Attach the ``install`` command to ``app``."""

    app.command("install")(install_command)
