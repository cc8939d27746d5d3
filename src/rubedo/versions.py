# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse version expressions into a closed set of checkout variants."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, TypeAlias

LATEST_KEYWORD: Final[str] = "latest"
TAG_PREFIX: Final[str] = "v"
_SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
_FULL_SHA_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9a-f]{40}")
_SHORT_SHA_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9a-f]{7,8}")
_SHORT_SHA_DISPLAY: Final[int] = 7


@dataclass(frozen=True, slots=True)
class Latest:
    """Track the remote default branch."""


@dataclass(frozen=True, slots=True)
class Tag:
    """Semantic version published as tag ``v<version>``."""

    version: str

    @property
    def tag_name(self) -> str:
        return f"{TAG_PREFIX}{self.version}"

    @property
    def ref(self) -> str:
        return f"tags/{self.tag_name}"


@dataclass(frozen=True, slots=True)
class Commit:
    """Full or abbreviated commit hash."""

    sha: str

    @property
    def is_abbreviated(self) -> bool:
        return len(self.sha) < 40


@dataclass(frozen=True, slots=True)
class Ref:
    """Branch or any other name git can check out."""

    name: str


VersionVariant: TypeAlias = Latest | Tag | Commit | Ref


def classify(expression: str) -> VersionVariant:
    """Return the variant selected by ``expression``.

    The checks run in a fixed order (``latest``, semver, commit hash, ref), so
    every string maps to exactly one variant.

    Args:
        expression: Version expression declared for a dependency.

    Returns:
        VersionVariant: Parsed variant.
    """

    if expression == LATEST_KEYWORD:
        return Latest()
    if _SEMVER_PATTERN.fullmatch(expression):
        return Tag(expression)
    if _FULL_SHA_PATTERN.fullmatch(expression) or _SHORT_SHA_PATTERN.fullmatch(expression):
        return Commit(expression)
    return Ref(expression)


def describe(variant: VersionVariant, local_path: str | None = None) -> str:
    """Return the human-readable label used in status output."""

    if local_path:
        return f"local path {local_path}"
    match variant:
        case Latest():
            return "latest version"
        case Tag(version=version):
            return f"version {version}"
        case Commit(sha=sha) if not variant.is_abbreviated:
            return f"commit {sha[:_SHORT_SHA_DISPLAY]}..."
        case Commit(sha=sha):
            return f"commit {sha}"
        case Ref(name=name):
            return f"branch or ref '{name}'"
    raise TypeError(f"unsupported version variant: {variant!r}")


__all__ = [
    "Commit",
    "Latest",
    "Ref",
    "Tag",
    "VersionVariant",
    "classify",
    "describe",
]
