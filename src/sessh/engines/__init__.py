"""Execution engines that run the sessh binary."""

from __future__ import annotations

from .base import CommandResult, SesshEngine
from .subprocess import SubprocessEngine

__all__ = ["CommandResult", "SesshEngine", "SubprocessEngine"]
