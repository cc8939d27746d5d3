# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Options and helpers shared by every rubedo command."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from ..errors import RubedoError
from ..logging import configure_verbose_logging, fail
from ..project import ProjectRoot

ROOT_OPTION = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Project root containing manifest.json.",
        show_default=False,
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log git commands and build stages to stderr."),
]
JOBS_OPTION = Annotated[
    int | None,
    typer.Option(
        "--jobs",
        "-j",
        min=1,
        help="Maximum dependencies processed concurrently (defaults to rubedo.toml or 4).",
        show_default=False,
    ),
]
SKIP_UPDATE_CHECK_OPTION = Annotated[
    bool,
    typer.Option(
        "--skip-update-check",
        help="Build even when dependencies have updates available.",
    ),
]


def prepare_logging(verbose: bool) -> None:
    if verbose:
        configure_verbose_logging()


def load_project(root: Path, *, use_emoji: bool) -> ProjectRoot:
    """Load the project at ``root``, exiting with status 1 on configuration errors."""

    with command_errors(use_emoji=use_emoji):
        return ProjectRoot.load(root.resolve())


@contextmanager
def command_errors(*, use_emoji: bool, prefix: str | None = None) -> Iterator[None]:
    """Translate :class:`RubedoError` into a ``fail`` line and exit status 1."""

    try:
        yield
    except RubedoError as exc:
        message = f"{prefix}: {exc}" if prefix else str(exc)
        fail(message, use_emoji=use_emoji)
        raise typer.Exit(code=1) from exc


__all__ = [
    "EMOJI_OPTION",
    "JOBS_OPTION",
    "ROOT_OPTION",
    "SKIP_UPDATE_CHECK_OPTION",
    "VERBOSE_OPTION",
    "command_errors",
    "load_project",
    "prepare_logging",
]
