# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Derived per-dependency records shared by the store, resolver and linker."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .manifest import DependencyDescriptor
from .project import ProjectRoot
from .versions import VersionVariant, classify


@dataclass(frozen=True, slots=True)
class ModuleRecord:
    """A dependency paired with its deterministic location in the module store.

    Records are derived on demand and never persisted.
    """

    descriptor: DependencyDescriptor
    local_path: Path
    is_linked: bool

    @property
    def identity(self) -> str:
        return self.descriptor.identity

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def variant(self) -> VersionVariant:
        return classify(self.descriptor.version)


def module_path(project: ProjectRoot, descriptor: DependencyDescriptor) -> Path:
    """Return ``<store-root>/<owner>/<name>`` for ``descriptor``."""

    return project.store_root / descriptor.owner / descriptor.name


def module_record(project: ProjectRoot, descriptor: DependencyDescriptor) -> ModuleRecord:
    return ModuleRecord(
        descriptor=descriptor,
        local_path=module_path(project, descriptor),
        is_linked=bool(descriptor.local_path),
    )


__all__ = ["ModuleRecord", "module_path", "module_record"]
