# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for copying dependency and project assets into the output."""

from __future__ import annotations

from pathlib import Path

import pytest
from support import descriptor

from rubedo.assets import ASSET_CATEGORIES, AssetLinker
from rubedo.errors import AssetLinkFailed
from rubedo.modules import ModuleRecord, module_record


def _module(project, identity: str, files: dict[str, str]) -> ModuleRecord:
    record = module_record(project, descriptor(identity))
    for relative, content in files.items():
        target = record.local_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return record


def _snapshot(root: Path) -> dict[str, str]:
    return {
        str(path.relative_to(root)): path.read_text(encoding="utf-8")
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_category_list_is_fixed() -> None:
    assert len(ASSET_CATEGORIES) == 13
    assert {"blocks", "items", "entities", "functions", "texts"} <= set(ASSET_CATEGORIES)


def test_assets_are_namespaced_by_repository_name(project_factory) -> None:
    project = project_factory()
    first = _module(project, "alpha/ores", {"blocks/ruby.json": "ruby", "recipes/ruby.json": "r"})
    second = _module(project, "beta/tools", {"blocks/ruby.json": "other", "items/pick.json": "pick"})

    written = AssetLinker(project, use_emoji=False).link_assets([first, second])

    output = project.output_dir
    assert (output / "blocks" / "ores" / "ruby.json").read_text(encoding="utf-8") == "ruby"
    assert (output / "blocks" / "tools" / "ruby.json").read_text(encoding="utf-8") == "other"
    assert (output / "items" / "tools" / "pick.json").is_file()
    assert output / "recipes" / "ores" in written
    assert not (output / "animations").exists()


def test_linking_twice_gives_identical_output_and_drops_removed_files(project_factory) -> None:
    project = project_factory()
    module = _module(project, "alpha/ores", {"blocks/ruby.json": "ruby", "blocks/old.json": "old"})
    linker = AssetLinker(project, use_emoji=False)

    linker.link_assets([module])
    (module.local_path / "blocks" / "old.json").unlink()
    linker.link_assets([module])
    first = _snapshot(project.output_dir)
    linker.link_assets([module])

    assert _snapshot(project.output_dir) == first
    assert "blocks/ores/old.json" not in first


def test_texts_are_skipped_with_warning(project_factory, capsys: pytest.CaptureFixture[str]) -> None:
    project = project_factory()
    module = _module(project, "alpha/ores", {"texts/en_US.lang": "tile.ruby.name=Ruby"})

    AssetLinker(project, use_emoji=False).link_assets([module])

    assert not (project.output_dir / "texts").exists()
    assert "Skipping texts from alpha/ores" in capsys.readouterr().out


def test_entities_and_functions_are_skipped_per_module(project_factory, capsys: pytest.CaptureFixture[str]) -> None:
    project = project_factory()
    modules = [
        _module(project, "alpha/ores", {"entities/golem.json": "a", "functions/tick.mcfunction": "say a"}),
        _module(project, "beta/tools", {"entities/golem.json": "b", "blocks/anvil.json": "{}"}),
    ]

    written = AssetLinker(project, use_emoji=False).link_assets(modules)

    output = capsys.readouterr().out
    assert "Skipping entities from alpha/ores" in output
    assert "Skipping functions from alpha/ores" in output
    assert "Skipping entities from beta/tools" in output
    assert written == [project.output_dir / "blocks" / "tools"]
    assert not (project.output_dir / "entities").exists()
    assert not (project.output_dir / "functions").exists()


def test_shared_short_name_is_rejected(project_factory) -> None:
    project = project_factory()
    modules = [
        _module(project, "alpha/lib", {"blocks/a.json": "a"}),
        _module(project, "beta/lib", {"blocks/b.json": "b"}),
    ]

    with pytest.raises(AssetLinkFailed, match="already used by alpha/lib") as excinfo:
        AssetLinker(project, use_emoji=False).link_assets(modules)

    assert excinfo.value.identity == "beta/lib"
    assert not (project.output_dir / "blocks").exists()


def test_project_assets_are_merged_into_category_roots(project_factory) -> None:
    project = project_factory()
    (project.path / "functions").mkdir()
    (project.path / "functions" / "setup.mcfunction").write_text("say hi", encoding="utf-8")
    module = _module(project, "alpha/ores", {"functions/tick.mcfunction": "say tick"})
    linker = AssetLinker(project, use_emoji=False)

    linker.link_assets([module])
    written = linker.link_project_assets()

    assert written == [project.output_dir / "functions"]
    assert (project.output_dir / "functions" / "setup.mcfunction").is_file()
    assert not (project.output_dir / "functions" / "ores").exists()
