# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered configuration: built-in defaults, ``rubedo.toml``, then environment."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_FILENAME: Final[str] = "rubedo.toml"
MODULES_DIR_ENV: Final[str] = "RUBEDO_MODULES_DIR"
DEFAULT_MODULES_DIR: Final[str] = "rubedo_modules"
DEFAULT_OUTPUT_DIR: Final[str] = "build"
DEFAULT_REMOTE_TEMPLATE: Final[str] = "https://github.com/{identity}.git"


class WatchConfig(BaseModel):
    """Timing knobs for the change watcher."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    cooldown_seconds: float = Field(default=2.0, ge=0)
    debounce_seconds: float = Field(default=0.3, ge=0)


class RubedoConfig(BaseModel):
    """Resolved configuration for a single project root."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    modules_dir: str = DEFAULT_MODULES_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    jobs: int = Field(default=4, ge=1)
    remote_url_template: str = DEFAULT_REMOTE_TEMPLATE
    compile_command: tuple[str, ...] = ("npm", "run", "build")
    install_command: tuple[str, ...] = ("npm", "install")
    watch: WatchConfig = Field(default_factory=WatchConfig)

    @field_validator("compile_command", "install_command", mode="before")
    @classmethod
    def _coerce_command(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            return tuple(value.split())
        if isinstance(value, (list, tuple)):
            return tuple(str(entry) for entry in value)
        raise TypeError("commands must be a string or an array of strings")

    @field_validator("remote_url_template")
    @classmethod
    def _require_identity_placeholder(cls, value: str) -> str:
        if "{identity}" not in value:
            raise ValueError("remote_url_template must contain '{identity}'")
        return value

    def remote_url(self, identity: str) -> str:
        """Return the clone URL for ``identity`` (``owner/name``)."""

        return self.remote_url_template.format(identity=identity)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class ConfigLoader:
    """Load :class:`RubedoConfig` for a project root.

    Precedence, lowest first: defaults, ``rubedo.toml`` in the root, then the
    ``RUBEDO_MODULES_DIR`` environment variable.
    """

    def __init__(self, root: Path, *, env: Mapping[str, str] | None = None) -> None:
        self._root = root
        self._env = os.environ if env is None else env

    @classmethod
    def for_root(cls, root: Path, *, env: Mapping[str, str] | None = None) -> ConfigLoader:
        return cls(root.resolve(), env=env)

    def load(self) -> RubedoConfig:
        """Return the merged configuration.

        Raises:
            ConfigError: If the TOML document is malformed or values are invalid.
        """

        data: dict[str, Any] = {}
        data = _deep_merge(data, self._load_toml(self._root / CONFIG_FILENAME))
        data = _deep_merge(data, self._load_env())
        try:
            return RubedoConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Configuration invalid: {exc}") from exc

    @staticmethod
    def _load_toml(path: Path) -> Mapping[str, Any]:
        if not path.is_file():
            return {}
        try:
            with path.open("rb") as handle:
                return tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Unable to read {path}: {exc}") from exc

    def _load_env(self) -> Mapping[str, Any]:
        overrides: dict[str, Any] = {}
        if modules_dir := self._env.get(MODULES_DIR_ENV):
            overrides["modules_dir"] = modules_dir
        return overrides


__all__ = [
    "CONFIG_FILENAME",
    "ConfigLoader",
    "MODULES_DIR_ENV",
    "RubedoConfig",
    "WatchConfig",
]
