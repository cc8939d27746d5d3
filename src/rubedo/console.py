# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles for status output."""

from __future__ import annotations

import sys
from functools import cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout is a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _build_console(styled: bool, emoji: bool) -> Console:
    # No ``file=``: Rich resolves sys.stdout at print time, so CliRunner and
    # capsys still capture the output.
    return Console(
        color_system="auto" if styled else None,
        force_terminal=styled,
        no_color=not styled,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def status_console(*, color: bool, emoji: bool) -> Console:
    """Return the shared console for status lines.

    Colour is only honoured on a terminal; piped output stays plain so logs
    and test captures carry no escape codes.
    """

    return _build_console(color and detect_tty(), emoji)


def reset_consoles() -> None:
    """Forget cached consoles after stdout has been swapped."""

    _build_console.cache_clear()


__all__ = ["detect_tty", "reset_consoles", "status_console"]
