# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Line-oriented status output plus the diagnostic logger setup.

Status lines (``info``/``ok``/``warn``/``fail``) are what users read; they go
through a Rich console. Diagnostic detail such as git invocations and build
state transitions goes to stdlib loggers under ``rubedo`` and stays silent
unless :func:`configure_verbose_logging` attaches a handler.
"""

from __future__ import annotations

import logging
import sys

from rich.text import Text

from .console import detect_tty, status_console

ROOT_LOGGER_NAME = "rubedo"
_VERBOSE_MARKER = "_rubedo_verbose_configured"


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = status_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def get_logger(name: str) -> logging.Logger:
    """Return a diagnostic logger nested under the ``rubedo`` namespace.

    Args:
        name: Module ``__name__`` or a dotted suffix.

    Returns:
        logging.Logger: Logger whose records propagate to the ``rubedo`` root.
    """

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_verbose_logging() -> None:
    """Attach a stderr handler to the ``rubedo`` logger at DEBUG level."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if getattr(logger, _VERBOSE_MARKER, False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    setattr(logger, _VERBOSE_MARKER, True)


__all__ = [
    "configure_verbose_logging",
    "emoji",
    "fail",
    "get_logger",
    "info",
    "ok",
    "warn",
]
