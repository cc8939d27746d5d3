# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from rubedo.config import CONFIG_FILENAME, MODULES_DIR_ENV, ConfigLoader, RubedoConfig
from rubedo.errors import ConfigError
from rubedo.project import ProjectRoot


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = ConfigLoader.for_root(tmp_path, env={}).load()

    assert config == RubedoConfig()
    assert config.modules_dir == "rubedo_modules"
    assert config.remote_url("owner/name") == "https://github.com/owner/name.git"
    assert config.watch.cooldown_seconds == 2.0


def test_toml_values_override_defaults(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        "\n".join(
            [
                'output_dir = "dist"',
                "jobs = 8",
                'compile_command = "pnpm run bundle"',
                'install_command = ["pnpm", "install", "--frozen-lockfile"]',
                "[watch]",
                "debounce_seconds = 0.5",
            ]
        ),
        encoding="utf-8",
    )

    config = ConfigLoader.for_root(tmp_path, env={}).load()

    assert config.output_dir == "dist"
    assert config.jobs == 8
    assert config.compile_command == ("pnpm", "run", "bundle")
    assert config.install_command == ("pnpm", "install", "--frozen-lockfile")
    assert config.watch.debounce_seconds == 0.5
    assert config.watch.cooldown_seconds == 2.0


def test_environment_overrides_toml(tmp_path: Path) -> None:
    root = tmp_path / "addon"
    root.mkdir()
    (root / CONFIG_FILENAME).write_text('modules_dir = "vendor"\n', encoding="utf-8")
    shared = tmp_path / "shared-store"

    config = ConfigLoader.for_root(root, env={MODULES_DIR_ENV: str(shared)}).load()

    assert config.modules_dir == str(shared)
    project = ProjectRoot(path=root.resolve(), config=config)
    assert project.store_root == shared
    assert project.store_is_external()


def test_relative_store_root_stays_inside_project(tmp_path: Path) -> None:
    project = ProjectRoot(path=tmp_path.resolve())

    assert project.store_root == tmp_path.resolve() / "rubedo_modules"
    assert not project.store_is_external()
    assert project.output_manifest_path == tmp_path.resolve() / "build" / "manifest.json"


@pytest.mark.parametrize(
    "content",
    [
        "jobs = 0\n",
        'unknown_key = "x"\n',
        'remote_url_template = "https://example.invalid/repo.git"\n',
        "this is not toml",
    ],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, content: str) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigLoader.for_root(tmp_path, env={}).load()
