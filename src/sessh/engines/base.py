"""Core abstractions for sessh command engines."""

from __future__ import annotations

import typing as t
from dataclasses import dataclass
from typing import Protocol

if t.TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing the sessh binary once.

    ``stdout`` and ``stderr`` are decoded and stripped of surrounding
    whitespace; ``returncode`` is never ``None``.
    """

    cmd: list[str]
    stdout: str
    stderr: str
    returncode: int


class SesshEngine(Protocol):
    """Protocol for components that can execute sessh commands."""

    def run(
        self,
        cmd: Sequence[str],
        env: Mapping[str, str],
    ) -> CommandResult:  # pragma: no cover
        """Execute *cmd* and block until it exits."""
        ...

    async def arun(
        self,
        cmd: Sequence[str],
        env: Mapping[str, str],
    ) -> CommandResult:  # pragma: no cover
        """Execute *cmd* without blocking the event loop."""
        ...


__all__ = ["CommandResult", "SesshEngine"]
