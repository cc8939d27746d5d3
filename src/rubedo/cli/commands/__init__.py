# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import build, install, update, watch

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register every built-in command on ``app``."""

    install.register(app)
    update.register(app)
    build.register(app)
    watch.register(app)
