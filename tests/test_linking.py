# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for override link strategies."""

from __future__ import annotations

from pathlib import Path

import pytest

from rubedo.errors import CheckoutFailed
from rubedo.linking import LinkMethod, Linker, can_symlink, is_link, remove_path


def _target(tmp_path: Path) -> Path:
    target = tmp_path / "override"
    (target / "blocks").mkdir(parents=True)
    (target / "blocks" / "ore.json").write_text("{}", encoding="utf-8")
    return target


def test_first_successful_probe_wins_and_is_cached() -> None:
    calls: list[str] = []

    def failing() -> bool:
        calls.append("symlink")
        return False

    def succeeding() -> bool:
        calls.append("copy")
        return True

    linker = Linker(probes=[(LinkMethod.SYMLINK, failing), (LinkMethod.COPY, succeeding)], use_emoji=False)

    assert linker.method is LinkMethod.COPY
    assert linker.method is LinkMethod.COPY
    assert calls == ["symlink", "copy"]


def test_fallback_is_reported(capsys: pytest.CaptureFixture[str]) -> None:
    linker = Linker(
        probes=[(LinkMethod.SYMLINK, lambda: False), (LinkMethod.COPY, lambda: True)],
        use_emoji=False,
    )

    assert linker.method is LinkMethod.COPY
    assert "symlink links unavailable, falling back to copy" in capsys.readouterr().out


def test_no_usable_method_raises() -> None:
    linker = Linker(probes=[(LinkMethod.SYMLINK, lambda: False)], use_emoji=False)

    with pytest.raises(CheckoutFailed):
        _ = linker.method


def test_copy_fallback_replaces_existing_directory(tmp_path: Path) -> None:
    target = _target(tmp_path)
    link_path = tmp_path / "store" / "owner" / "name"
    (link_path / "stale").mkdir(parents=True)
    linker = Linker(probes=[(LinkMethod.COPY, lambda: True)], use_emoji=False)

    method = linker.link(link_path, target, identity="owner/name")

    assert method is LinkMethod.COPY
    assert (link_path / "blocks" / "ore.json").is_file()
    assert not (link_path / "stale").exists()
    assert not is_link(link_path)
    assert not linker.is_linked_to(link_path, target)


@pytest.mark.skipif(not can_symlink(), reason="symlinks unavailable")
def test_symlink_points_at_override(tmp_path: Path) -> None:
    target = _target(tmp_path)
    link_path = tmp_path / "store" / "owner" / "name"
    linker = Linker(probes=[(LinkMethod.SYMLINK, lambda: True)], use_emoji=False)

    linker.link(link_path, target)

    assert is_link(link_path)
    assert linker.is_linked_to(link_path, target)

    remove_path(link_path)
    assert not link_path.exists()
    assert (target / "blocks" / "ore.json").is_file()


def test_remove_path_handles_files_and_missing_paths(tmp_path: Path) -> None:
    file_path = tmp_path / "file.txt"
    file_path.write_text("x", encoding="utf-8")

    remove_path(file_path)
    remove_path(tmp_path / "missing")

    assert not file_path.exists()
