# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Explicit project root threaded through every pipeline component."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .config import ConfigLoader, RubedoConfig

MANIFEST_FILENAME: Final[str] = "manifest.json"
SOURCE_DIRNAME: Final[str] = "src"


@dataclass(frozen=True, slots=True)
class ProjectRoot:
    """Resolved project directory plus its configuration.

    All paths the pipeline reads or writes derive from this value; nothing
    consults the process working directory.
    """

    path: Path
    config: RubedoConfig = field(default_factory=RubedoConfig)

    @classmethod
    def load(cls, path: Path) -> ProjectRoot:
        """Resolve ``path`` and load its layered configuration."""

        resolved = path.expanduser().resolve()
        return cls(path=resolved, config=ConfigLoader.for_root(resolved).load())

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_FILENAME

    @property
    def source_dir(self) -> Path:
        return self.path / SOURCE_DIRNAME

    @property
    def store_root(self) -> Path:
        """Return the module store root; absolute overrides are used verbatim."""

        configured = Path(self.config.modules_dir).expanduser()
        return configured if configured.is_absolute() else self.path / configured

    @property
    def output_dir(self) -> Path:
        configured = Path(self.config.output_dir).expanduser()
        return configured if configured.is_absolute() else self.path / configured

    @property
    def output_manifest_path(self) -> Path:
        return self.output_dir / MANIFEST_FILENAME

    def store_is_external(self) -> bool:
        """Return ``True`` when the module store lives outside the project tree."""

        try:
            self.store_root.resolve().relative_to(self.path)
        except ValueError:
            return True
        return False


__all__ = ["MANIFEST_FILENAME", "ProjectRoot", "SOURCE_DIRNAME"]
