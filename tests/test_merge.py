# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for manifest merging."""

from __future__ import annotations

import copy
import json

import pytest
from support import descriptor

from rubedo.errors import ManifestMergeFailed
from rubedo.merge import ManifestMerger, dependency_key
from rubedo.modules import module_record

HOST = {
    "format_version": 2,
    "header": {"name": "host"},
    "dependencies": [{"module_name": "@minecraft/server", "version": "1.8.0"}],
    "capabilities": ["script_eval"],
}


def test_dependency_key_prefers_module_name() -> None:
    assert dependency_key({"module_name": "@minecraft/server", "uuid": "x"}) == "@minecraft/server"
    assert dependency_key({"uuid": "1234"}) == "1234"
    assert dependency_key({"version": [1, 0, 0]}) is None


def test_merge_unions_without_duplicates_and_first_seen_wins() -> None:
    dependency_manifests = [
        {
            "dependencies": [
                {"module_name": "@minecraft/server", "version": "1.9.0"},
                {"module_name": "@minecraft/server-ui", "version": "1.1.0"},
            ],
            "capabilities": ["script_eval", "chemistry"],
        },
        {
            "dependencies": [
                {"uuid": "5f7b5a0a-0000-0000-0000-000000000000", "version": [1, 0, 0]},
                {"module_name": "@minecraft/server-ui", "version": "1.2.0"},
            ],
            "capabilities": ["editorExtension"],
        },
    ]

    merged = ManifestMerger.merge(HOST, dependency_manifests)

    assert merged["dependencies"] == [
        {"module_name": "@minecraft/server", "version": "1.8.0"},
        {"module_name": "@minecraft/server-ui", "version": "1.1.0"},
        {"uuid": "5f7b5a0a-0000-0000-0000-000000000000", "version": [1, 0, 0]},
    ]
    assert merged["capabilities"] == ["script_eval", "chemistry", "editorExtension"]
    assert merged["header"] == {"name": "host"}


def test_merge_is_idempotent_and_leaves_host_untouched() -> None:
    host = copy.deepcopy(HOST)
    extras = [{"dependencies": [{"module_name": "@minecraft/server-ui"}], "capabilities": ["chemistry"]}]

    once = ManifestMerger.merge(host, extras)
    twice = ManifestMerger.merge(once, extras)

    assert once == twice
    assert host == HOST


def test_merge_creates_missing_or_null_lists() -> None:
    merged = ManifestMerger.merge(
        {"header": {"name": "host"}, "capabilities": None},
        [{"dependencies": [{"module_name": "@minecraft/server"}], "capabilities": ["chemistry"]}],
    )

    assert merged["dependencies"] == [{"module_name": "@minecraft/server"}]
    assert merged["capabilities"] == ["chemistry"]


def test_merge_into_output_writes_canonical_manifest(project_factory) -> None:
    project = project_factory()
    record = module_record(project, descriptor("owner/lib"))
    record.local_path.mkdir(parents=True)
    (record.local_path / "manifest.json").write_text(
        json.dumps({"dependencies": [{"module_name": "@minecraft/server-ui"}]}),
        encoding="utf-8",
    )
    missing = module_record(project, descriptor("owner/no-manifest"))

    destination = ManifestMerger(project, use_emoji=False).merge_into_output(HOST, [record, missing])

    assert destination == project.output_dir / "manifest.json"
    written = json.loads(destination.read_text(encoding="utf-8"))
    assert [entry["module_name"] for entry in written["dependencies"]] == [
        "@minecraft/server",
        "@minecraft/server-ui",
    ]


def test_unreadable_dependency_manifest_fails(project_factory) -> None:
    project = project_factory()
    record = module_record(project, descriptor("owner/lib"))
    record.local_path.mkdir(parents=True)
    (record.local_path / "manifest.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(ManifestMergeFailed) as excinfo:
        ManifestMerger(project, use_emoji=False).merge_into_output(HOST, [record])

    assert excinfo.value.identity == "owner/lib"
