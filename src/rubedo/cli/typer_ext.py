# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer helpers for consistent, sorted CLI help output."""

from __future__ import annotations

from typing import Any

import typer
from click.core import Context
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup


def _primary_option_name(opts: tuple[str, ...], fallback: str) -> str:
    long_names = [name for name in opts if name.startswith("--")]
    candidate = long_names[0] if long_names else (next(iter(opts), "") or fallback)
    return candidate.lstrip("-").lower()


class SortedTyperCommand(TyperCommand):
    """Typer command that lists its options alphabetically in help output."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        records: list[tuple[str, tuple[str, str]]] = []
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            opts = tuple(param.opts) + tuple(param.secondary_opts)
            records.append((_primary_option_name(opts, param.name or ""), record))
        if records:
            with formatter.section("Options"):
                formatter.write_dl([record for _, record in sorted(records, key=lambda item: item[0])])


class SortedTyperGroup(TyperGroup):
    """Typer group that sorts subcommands and uses :class:`SortedTyperCommand`."""

    command_class = SortedTyperCommand

    def list_commands(self, ctx: Context) -> list[str]:
        return sorted(super().list_commands(ctx))


def create_typer(**kwargs: Any) -> typer.Typer:
    """Return a :class:`typer.Typer` that renders sorted help listings."""

    kwargs.setdefault("cls", SortedTyperGroup)
    kwargs.setdefault("no_args_is_help", True)
    kwargs.setdefault("add_completion", False)
    return typer.Typer(**kwargs)


__all__ = ["SortedTyperCommand", "SortedTyperGroup", "create_typer"]
