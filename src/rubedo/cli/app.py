# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from .commands import register_commands
from .typer_ext import create_typer

app = create_typer(name="rubedo", help="Dependency linker and build tool for Bedrock addons.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"rubedo {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_show_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Dependency linker and build tool for Bedrock addons."""


register_commands(app)

__all__ = ["app"]
