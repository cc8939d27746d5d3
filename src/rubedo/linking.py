# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Link a store path to a local override using the best method the platform allows."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable, Sequence
from enum import Enum
from functools import cache
from pathlib import Path
from typing import Final

from .errors import CheckoutFailed
from .logging import get_logger, warn
from .process_utils import SubprocessExecutionError, run_command

LOGGER = get_logger(__name__)

CapabilityProbe = Callable[[], bool]


class LinkMethod(Enum):
    """Ways of exposing an override directory at its store path, best first."""

    SYMLINK = "symlink"
    JUNCTION = "junction"
    COPY = "copy"


@cache
def can_symlink() -> bool:
    """Return ``True`` when this process may create directory symlinks."""

    with tempfile.TemporaryDirectory(prefix="rubedo-probe-") as scratch:
        target = Path(scratch) / "target"
        target.mkdir()
        try:
            os.symlink(target, Path(scratch) / "link", target_is_directory=True)
        except (OSError, NotImplementedError):
            return False
    return True


@cache
def can_junction() -> bool:
    """Return ``True`` on Windows hosts where ``mklink /J`` is reachable."""

    return os.name == "nt" and shutil.which("cmd") is not None


def can_copy() -> bool:
    return True


DEFAULT_PROBES: Final[tuple[tuple[LinkMethod, CapabilityProbe], ...]] = (
    (LinkMethod.SYMLINK, can_symlink),
    (LinkMethod.JUNCTION, can_junction),
    (LinkMethod.COPY, can_copy),
)


def is_link(path: Path) -> bool:
    """Return ``True`` for symlinks and directory junctions."""

    return path.is_symlink() or os.path.isjunction(path)


def remove_path(path: Path) -> None:
    """Delete ``path``; links are removed without touching their targets."""

    if path.is_symlink():
        path.unlink()
    elif os.path.isjunction(path):
        os.rmdir(path)
    elif path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()


class Linker:
    """Create override links using a ranked, cached list of capability probes.

    Args:
        probes: ``(method, probe)`` pairs in preference order. Tests pass
            their own probes to force a particular branch.
        use_emoji: Whether fallback warnings include emoji glyphs.
    """

    def __init__(
        self,
        *,
        probes: Sequence[tuple[LinkMethod, CapabilityProbe]] = DEFAULT_PROBES,
        use_emoji: bool = True,
    ) -> None:
        self._probes = tuple(probes)
        self._use_emoji = use_emoji
        self._method: LinkMethod | None = None

    @property
    def method(self) -> LinkMethod:
        """Return the first method whose probe succeeds, evaluated once."""

        if self._method is None:
            for method, probe in self._probes:
                if probe():
                    self._method = method
                    break
            else:
                raise CheckoutFailed("no usable method for linking local overrides")
            preferred = self._probes[0][0]
            if self._method is not preferred:
                warn(
                    f"{preferred.value} links unavailable, falling back to {self._method.value}",
                    use_emoji=self._use_emoji,
                )
        return self._method

    def is_linked_to(self, link_path: Path, target: Path) -> bool:
        """Return ``True`` when ``link_path`` already resolves to ``target`` through a link."""

        if not is_link(link_path):
            return False
        return os.path.realpath(link_path) == os.path.realpath(target)

    def link(self, link_path: Path, target: Path, *, identity: str | None = None) -> LinkMethod:
        """Expose ``target`` at ``link_path``; anything already there is replaced.

        Raises:
            CheckoutFailed: If the chosen method fails.
        """

        method = self.method
        if os.path.lexists(link_path):
            remove_path(link_path)
        link_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            match method:
                case LinkMethod.SYMLINK:
                    os.symlink(target, link_path, target_is_directory=True)
                case LinkMethod.JUNCTION:
                    run_command(["cmd", "/c", "mklink", "/J", str(link_path), str(target)], capture_output=True)
                case LinkMethod.COPY:
                    shutil.copytree(target, link_path, symlinks=True)
        except (OSError, SubprocessExecutionError) as exc:
            raise CheckoutFailed(f"unable to {method.value} {link_path} -> {target}: {exc}", identity=identity) from exc
        LOGGER.debug("%s: %s %s -> %s", identity, method.value, link_path, target)
        return method


__all__ = [
    "DEFAULT_PROBES",
    "LinkMethod",
    "Linker",
    "can_copy",
    "can_junction",
    "can_symlink",
    "is_link",
    "remove_path",
]
