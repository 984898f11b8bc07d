"""Testing helpers for sessh clients.

:class:`MockEngine` stands in for :class:`sessh.engines.SubprocessEngine`
without spawning anything: it records every invocation and replays scripted
results. Unscripted operations answer ``{"ok": true, "op": <op>}``.
"""

from __future__ import annotations

import asyncio
import json
import typing as t
from dataclasses import dataclass, field

from sessh.engines.base import CommandResult

if t.TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    ScriptKey = t.Union[str, tuple[str, ...]]
    ScriptValue = t.Union[CommandResult, BaseException]


def result(
    *,
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
    cmd: Sequence[str] = (),
) -> CommandResult:
    """Return a scripted command result.

    >>> result(stdout='{"ok": true, "op": "open"}').returncode
    0
    """
    return CommandResult(
        cmd=list(cmd),
        stdout=stdout,
        stderr=stderr,
        returncode=returncode,
    )


def ok(op: str, **fields: t.Any) -> CommandResult:
    """Return a successful result whose stdout is a sessh JSON object.

    >>> ok("logs", output="hi", lines=1).stdout
    '{"ok": true, "op": "logs", "output": "hi", "lines": 1}'
    """
    return result(stdout=json.dumps({"ok": True, "op": op, **fields}))


@dataclass
class MockCall:
    """One recorded invocation."""

    cmd: list[str]
    env: dict[str, str]

    @property
    def args(self) -> list[str]:
        """Arguments after the sessh executable."""
        return self.cmd[1:]


@dataclass
class MockEngine:
    """In-memory engine used in doctests and unit tests.

    *script* is keyed either by operation name (``"logs"``) or by the full
    argument tuple after the executable; the full tuple wins. A scripted
    exception is raised instead of returning a result.

    >>> engine = MockEngine(script={"status": ok("status", master=1, session=0)})
    >>> engine.run(["sessh", "status", "a", "h"], env={}).stdout
    '{"ok": true, "op": "status", "master": 1, "session": 0}'
    >>> engine.calls[0].args
    ['status', 'a', 'h']
    """

    script: Mapping[ScriptKey, ScriptValue] = field(default_factory=dict)
    calls: list[MockCall] = field(default_factory=list)

    def _lookup(self, cmd: Sequence[str]) -> ScriptValue:
        args = tuple(cmd[1:])
        if args in self.script:
            return self.script[args]
        if args and args[0] in self.script:
            return self.script[args[0]]
        return ok(args[0] if args else "")

    def run(self, cmd: Sequence[str], env: Mapping[str, str]) -> CommandResult:
        """Record the call and replay its scripted outcome."""
        self.calls.append(MockCall(cmd=list(cmd), env=dict(env)))
        entry = self._lookup(cmd)
        if isinstance(entry, BaseException):
            raise entry
        return CommandResult(
            cmd=list(cmd),
            stdout=entry.stdout,
            stderr=entry.stderr,
            returncode=entry.returncode,
        )

    async def arun(self, cmd: Sequence[str], env: Mapping[str, str]) -> CommandResult:
        """Async variant of :meth:`run`; yields to the loop once."""
        await asyncio.sleep(0)
        return self.run(cmd, env)


__all__ = ["MockCall", "MockEngine", "ok", "result"]
