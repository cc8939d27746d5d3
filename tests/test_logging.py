# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for status output and diagnostic logging helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from rubedo.console import reset_consoles, status_console
from rubedo.logging import ROOT_LOGGER_NAME, configure_verbose_logging, fail, get_logger, info, ok, warn
from rubedo.process_utils import describe_command, run_command


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    if hasattr(logger, "_rubedo_verbose_configured"):
        delattr(logger, "_rubedo_verbose_configured")


def test_loggers_nest_under_package_namespace() -> None:
    assert get_logger("rubedo.store").name == "rubedo.store"
    assert get_logger("plugins.extra").name == "rubedo.plugins.extra"
    assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME


def test_verbose_logging_is_configured_once(restore_root_logger: logging.Logger) -> None:
    before = len(restore_root_logger.handlers)

    configure_verbose_logging()
    configure_verbose_logging()

    assert len(restore_root_logger.handlers) == before + 1
    assert restore_root_logger.level == logging.DEBUG


def test_status_lines_respect_emoji_flag(capsys: pytest.CaptureFixture[str]) -> None:
    info("plain", use_emoji=False)
    ok("done", use_emoji=True)
    warn("careful", use_emoji=False)
    fail("broken", use_emoji=True)

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "plain"
    assert lines[1].startswith("✅") and lines[1].endswith("done")
    assert lines[2] == "careful"
    assert lines[3].startswith("❌") and lines[3].endswith("broken")


def test_describe_command_quotes_arguments() -> None:
    assert describe_command(["npm", "run", "build:prod", "--", "two words"]) == "npm run build:prod -- 'two words'"


def test_run_command_reports_missing_executables() -> None:
    with pytest.raises(FileNotFoundError, match="was not found on PATH"):
        run_command(["rubedo-definitely-missing-tool"])


def test_status_console_is_plain_off_a_terminal() -> None:
    console = status_console(color=True, emoji=False)

    assert console is status_console(color=True, emoji=False)
    assert console.no_color
    reset_consoles()
    assert status_console(color=True, emoji=False) is not console
