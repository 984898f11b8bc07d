"""Subprocess-backed sessh engine."""

from __future__ import annotations

import asyncio
import logging
import shutil
import subprocess
import typing as t

from sessh import exc
from sessh.engines.base import CommandResult

if t.TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="backslashreplace").strip()


def _normalize_returncode(cmd: Sequence[str], returncode: int | None) -> int:
    """Map a missing or signal exit status to 0.

    Only an explicit non-zero exit counts as a failure exit; a child killed by
    a signal reports a negative status, which is treated like no status.
    """
    if returncode is None or returncode < 0:
        logger.debug(
            "no exit status for %s (returncode=%s), treating as 0",
            subprocess.list2cmdline(cmd),
            returncode,
        )
        return 0
    return returncode


class SubprocessEngine:
    """Execute sessh commands by spawning the sessh CLI binary.

    stdin, stdout and stderr are always piped; the child never inherits the
    caller's terminal. There is no timeout: a hung sessh hangs the call.

    Examples
    --------
    >>> engine = SubprocessEngine()
    >>> engine.run(["/nonexistent/sessh", "status", "a", "h"], env={})
    Traceback (most recent call last):
    ...
    sessh.exc.SesshCommandNotFound: sessh binary not found: /nonexistent/sessh
    """

    def _resolve(self, cmd: Sequence[str], env: Mapping[str, str]) -> list[str]:
        sessh_bin = shutil.which(cmd[0], path=env.get("PATH"))
        if sessh_bin is None:
            raise exc.SesshCommandNotFound(cmd[0])
        resolved = [sessh_bin]
        resolved.extend(str(value) for value in cmd[1:])
        return resolved

    def run(self, cmd: Sequence[str], env: Mapping[str, str]) -> CommandResult:
        """Execute a sessh command via subprocess and return its output."""
        argv = self._resolve(cmd, env)
        logger.debug("running %s", subprocess.list2cmdline(argv))

        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=dict(env),
            )
            stdout, stderr = process.communicate()
        except Exception:
            logger.exception("Exception for %s", subprocess.list2cmdline(argv))
            raise

        return self._result(argv, stdout, stderr, process.returncode)

    async def arun(self, cmd: Sequence[str], env: Mapping[str, str]) -> CommandResult:
        """Execute a sessh command via :mod:`asyncio.subprocess`.

        Both output streams are drained concurrently while waiting for exit.
        """
        argv = self._resolve(cmd, env)
        logger.debug("running %s", subprocess.list2cmdline(argv))

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(env),
            )
            stdout, stderr = await process.communicate()
        except Exception:
            logger.exception("Exception for %s", subprocess.list2cmdline(argv))
            raise

        return self._result(argv, stdout, stderr, process.returncode)

    def _result(
        self,
        argv: list[str],
        stdout: bytes | None,
        stderr: bytes | None,
        returncode: int | None,
    ) -> CommandResult:
        result = CommandResult(
            cmd=argv,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            returncode=_normalize_returncode(argv, returncode),
        )
        logger.debug(
            "stdout for %s: %s",
            subprocess.list2cmdline(argv),
            result.stdout,
        )
        return result


__all__ = ["SubprocessEngine"]
