"""Clients for persistent remote sessions managed by sessh.

sessh.client
~~~~~~~~~~~~

:class:`SesshClient` blocks until sessh exits; :class:`AsyncSesshClient`
awaits it on the running event loop. Both build the same argument lists and
environment, and both return the same typed responses.
"""

from __future__ import annotations

import logging
import typing as t

from . import exc
from .common import (
    ARG_SEPARATOR,
    DEFAULT_LINES,
    build_args,
    build_cmd,
    build_env,
    check_lines,
    check_text,
)
from .config import SessionConfig
from .engines import SubprocessEngine
from .otel import start_span
from .response import LogsResponse, SesshResponse, StatusResponse, parse_response

if t.TYPE_CHECKING:
    import types

    from typing_extensions import Self

    from .engines import CommandResult, SesshEngine

    ResponseT = t.TypeVar("ResponseT", bound=SesshResponse)

logger = logging.getLogger(__name__)


class BaseSesshClient:
    """Configuration and argument building shared by both clients.

    Creating a client only stores its settings; no process is spawned until
    an operation is called.

    Parameters
    ----------
    alias : str
        Name of the remote multiplexed session.
    host : str
        SSH target, e.g. ``user@host``.
    port : int, optional
        SSH port, appended to ``open``, ``status`` and ``close``.
    sessh_bin : str, optional
        Path to the sessh executable, ``sessh`` on ``PATH`` by default.
    identity : str, optional
        Private key path, exported as ``SESSH_IDENTITY``.
    proxyjump : str, optional
        Jump host, exported as ``SESSH_PROXYJUMP``.
    engine : :class:`sessh.engines.SesshEngine`, optional
        Runs the binary. Defaults to :class:`sessh.engines.SubprocessEngine`.
    """

    def __init__(
        self,
        alias: str,
        host: str,
        port: int | None = None,
        *,
        sessh_bin: str | None = None,
        identity: str | None = None,
        proxyjump: str | None = None,
        engine: SesshEngine | None = None,
    ) -> None:
        self.config = SessionConfig(
            alias=alias,
            host=host,
            port=port,
            sessh_bin=sessh_bin,
            identity=identity,
            proxyjump=proxyjump,
        )
        self.engine: SesshEngine = engine if engine is not None else SubprocessEngine()

    @classmethod
    def from_config(
        cls,
        config: SessionConfig,
        engine: SesshEngine | None = None,
    ) -> Self:
        """Create a client from an existing :class:`SessionConfig`."""
        return cls(
            config.alias,
            config.host,
            config.port,
            sessh_bin=config.sessh_bin,
            identity=config.identity,
            proxyjump=config.proxyjump,
            engine=engine,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"(alias={self.config.alias!r}, host={self.config.host!r})"
        )

    @property
    def alias(self) -> str:
        """Remote session alias."""
        return self.config.alias

    @property
    def host(self) -> str:
        """SSH target."""
        return self.config.host

    def _open_args(self) -> list[str]:
        return build_args("open", self.config, include_port=True)

    def _run_args(self, command: str) -> list[str]:
        check_text("command", command)
        return build_args("run", self.config, ARG_SEPARATOR, command)

    def _logs_args(self, lines: int) -> list[str]:
        return build_args("logs", self.config, check_lines(lines))

    def _status_args(self) -> list[str]:
        return build_args("status", self.config, include_port=True)

    def _close_args(self) -> list[str]:
        return build_args("close", self.config, include_port=True)

    def _keys_args(self, key_sequence: str) -> list[str]:
        check_text("key_sequence", key_sequence)
        return build_args("keys", self.config, ARG_SEPARATOR, key_sequence)

    def _pane_args(self, lines: int) -> list[str]:
        return build_args("pane", self.config, check_lines(lines))

    def _span_attributes(self) -> dict[str, str]:
        return {"sessh.alias": self.config.alias, "sessh.host": self.config.host}

    def _parse(
        self,
        result: CommandResult,
        response_cls: type[ResponseT],
    ) -> ResponseT:
        return response_cls.from_payload(parse_response(result), result.stdout)

    def _attach_error(self) -> exc.AttachNotSupported:
        return exc.AttachNotSupported(self.config.alias, self.config.host)


class SesshClient(BaseSesshClient):
    """Blocking client for one persistent remote session.

    Examples
    --------
    >>> from sessh.testing import MockEngine
    >>> client = SesshClient("agent", "user@host", engine=MockEngine())
    >>> client.open()
    SesshResponse(ok=True, op='open')
    >>> client.run("cd /tmp && ls")
    SesshResponse(ok=True, op='run')
    >>> client.engine.calls[-1].args
    ['run', 'agent', 'user@host', '--', 'cd /tmp && ls']

    As a context manager the session is opened on entry and closed on exit:

    >>> with SesshClient("agent", "user@host", engine=MockEngine()) as client:
    ...     _ = client.run("uptime")
    >>> [call.args[0] for call in client.engine.calls]
    ['open', 'run', 'close']
    """

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        try:
            self.close()
        except exc.SesshException:
            if exc_type is None:
                raise
            logger.debug(
                "close failed for %r while handling %r",
                self,
                exc_value,
                exc_info=True,
            )

    def _call(self, args: list[str], response_cls: type[ResponseT]) -> ResponseT:
        with start_span(f"sessh.{args[0]}", **self._span_attributes()):
            result = self.engine.run(build_cmd(self.config, args), build_env(self.config))
        return self._parse(result, response_cls)

    def open(self) -> SesshResponse:
        """Open the session, or confirm it already exists.

        Runs ``sessh open <alias> <host> [port]``.
        """
        return self._call(self._open_args(), SesshResponse)

    def run(self, command: str) -> SesshResponse:
        """Type *command* into the session and press Enter.

        The command's output is not returned; read it with :meth:`logs`.

        Parameters
        ----------
        command : str
            Shell command line. Passed after ``--``, so a leading ``-`` is safe.
        """
        return self._call(self._run_args(command), SesshResponse)

    def logs(self, lines: int = DEFAULT_LINES) -> LogsResponse:
        r"""Capture the last *lines* lines of scrollback.

        >>> from sessh.testing import MockEngine, result
        >>> engine = MockEngine(script={
        ...     "logs": result(stdout='{"ok":true,"op":"logs","output":"hi\\n","lines":1}'),
        ... })
        >>> SesshClient("agent", "user@host", engine=engine).logs(50).output
        'hi\\n'
        """
        return self._call(self._logs_args(lines), LogsResponse)

    def status(self) -> StatusResponse:
        """Report whether the ControlMaster and the tmux session are alive."""
        return self._call(self._status_args(), StatusResponse)

    def close(self) -> SesshResponse:
        """Kill the tmux session and close the ControlMaster."""
        return self._call(self._close_args(), SesshResponse)

    def keys(self, key_sequence: str) -> SesshResponse:
        """Send raw key events, without a trailing Enter.

        Meant for interactive programs such as editors and pagers. tmux key
        names (``C-c``, ``Escape``) are understood by sessh.
        """
        return self._call(self._keys_args(key_sequence), SesshResponse)

    def pane(self, lines: int = DEFAULT_LINES) -> LogsResponse:
        """Capture what is currently on screen, up to *lines* lines."""
        return self._call(self._pane_args(lines), LogsResponse)

    def attach(self) -> t.NoReturn:
        """Not supported; attaching needs the caller's own terminal.

        >>> from sessh.testing import MockEngine
        >>> SesshClient("agent", "user@host", engine=MockEngine()).attach()
        Traceback (most recent call last):
        ...
        sessh.exc.AttachNotSupported: Interactive attach not supported via SDK. Use CLI: sessh attach agent user@host
        """
        raise self._attach_error()


class AsyncSesshClient(BaseSesshClient):
    """Asyncio client for one persistent remote session.

    Calls on one client are independent child processes and are not
    serialized; await them in order when ordering matters.

    Examples
    --------
    >>> import asyncio
    >>> from sessh.testing import MockEngine, result
    >>> engine = MockEngine(script={
    ...     "status": result(stdout='{"ok":true,"op":"status","master":1,"session":1}'),
    ... })
    >>> async def main() -> tuple[int, int]:
    ...     async with AsyncSesshClient("agent", "user@host", engine=engine) as client:
    ...         await client.run("echo hello")
    ...         status = await client.status()
    ...     return status.master, status.session
    >>> asyncio.run(main())
    (1, 1)
    """

    async def __aenter__(self) -> Self:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        try:
            await self.close()
        except exc.SesshException:
            if exc_type is None:
                raise
            logger.debug(
                "close failed for %r while handling %r",
                self,
                exc_value,
                exc_info=True,
            )

    async def _call(self, args: list[str], response_cls: type[ResponseT]) -> ResponseT:
        with start_span(f"sessh.{args[0]}", **self._span_attributes()):
            result = await self.engine.arun(
                build_cmd(self.config, args),
                build_env(self.config),
            )
        return self._parse(result, response_cls)

    async def open(self) -> SesshResponse:
        """Open the session, or confirm it already exists."""
        return await self._call(self._open_args(), SesshResponse)

    async def run(self, command: str) -> SesshResponse:
        """Type *command* into the session and press Enter."""
        return await self._call(self._run_args(command), SesshResponse)

    async def logs(self, lines: int = DEFAULT_LINES) -> LogsResponse:
        """Capture the last *lines* lines of scrollback."""
        return await self._call(self._logs_args(lines), LogsResponse)

    async def status(self) -> StatusResponse:
        """Report whether the ControlMaster and the tmux session are alive."""
        return await self._call(self._status_args(), StatusResponse)

    async def close(self) -> SesshResponse:
        """Kill the tmux session and close the ControlMaster."""
        return await self._call(self._close_args(), SesshResponse)

    async def keys(self, key_sequence: str) -> SesshResponse:
        """Send raw key events, without a trailing Enter."""
        return await self._call(self._keys_args(key_sequence), SesshResponse)

    async def pane(self, lines: int = DEFAULT_LINES) -> LogsResponse:
        """Capture what is currently on screen, up to *lines* lines."""
        return await self._call(self._pane_args(lines), LogsResponse)

    async def attach(self) -> t.NoReturn:
        """Not supported; attaching needs the caller's own terminal."""
        raise self._attach_error()


__all__ = ["AsyncSesshClient", "BaseSesshClient", "SesshClient"]
