"""Turn sessh output into typed responses.

sessh.response
~~~~~~~~~~~~~~

:func:`parse_response` decides whether an invocation failed and decodes the
JSON object sessh prints in ``SESSH_JSON`` mode. The dataclasses give each
operation its own shape: :class:`LogsResponse` for ``logs``/``pane``,
:class:`StatusResponse` for ``status`` and :class:`SesshResponse` for
everything else.
"""

from __future__ import annotations

import dataclasses
import json
import typing as t

from . import exc

if t.TYPE_CHECKING:
    from collections.abc import Mapping

    from typing_extensions import Self

    from .engines.base import CommandResult


def parse_response(result: CommandResult) -> dict[str, t.Any]:
    """Return the JSON object from *result*, or raise.

    A non-zero exit only fails here when stdout is empty; sessh may print a
    JSON error object on a failing exit and that is still decoded.

    Examples
    --------
    >>> from sessh.engines import CommandResult
    >>> parse_response(CommandResult(
    ...     cmd=["sessh", "open", "agent", "user@host"],
    ...     stdout='{"ok": true, "op": "open"}',
    ...     stderr="",
    ...     returncode=0,
    ... ))
    {'ok': True, 'op': 'open'}

    >>> parse_response(CommandResult(
    ...     cmd=["sessh", "open", "agent", "user@host"],
    ...     stdout="",
    ...     stderr="connection refused",
    ...     returncode=1,
    ... ))
    Traceback (most recent call last):
    ...
    sessh.exc.SesshCommandError: connection refused

    Raises
    ------
    :exc:`sessh.exc.SesshCommandError`
        Non-zero exit and nothing on stdout.
    :exc:`sessh.exc.ResponseDecodeError`
        stdout is not a JSON object.
    """
    if result.returncode != 0 and not result.stdout:
        raise exc.SesshCommandError(
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )

    try:
        payload = json.loads(result.stdout)
    except ValueError as e:
        raise exc.ResponseDecodeError(result.stdout) from e

    if not isinstance(payload, dict):
        raise exc.ResponseDecodeError(
            result.stdout,
            reason=f"expected object, got {type(payload).__name__}",
        )
    return payload


_REQUIRED: t.Any = object()


def _field(
    payload: Mapping[str, t.Any],
    key: str,
    kind: type,
    stdout: str | None,
    default: t.Any = _REQUIRED,
) -> t.Any:
    """Return ``payload[key]`` checked against *kind*.

    An absent key (or ``null`` for an optional one) gives *default*. ``bool``
    is not accepted where an ``int`` is expected.
    """
    value = payload.get(key)
    if value is None and (key not in payload or default is not _REQUIRED):
        if default is _REQUIRED:
            raise _schema_error(payload, stdout, f"missing {key!r}")
        return default
    if (isinstance(value, bool) and kind is not bool) or not isinstance(value, kind):
        raise _schema_error(
            payload,
            stdout,
            f"{key!r} must be {kind.__name__}, not {type(value).__name__}",
        )
    return value


def _schema_error(
    payload: Mapping[str, t.Any],
    stdout: str | None,
    reason: str,
) -> exc.ResponseSchemaError:
    return exc.ResponseSchemaError(
        json.dumps(payload) if stdout is None else stdout,
        reason=reason,
    )


@dataclasses.dataclass(frozen=True)
class SesshResponse:
    """Response shared by every sessh operation.

    ``payload`` keeps the decoded object as-is, so keys specific to a sessh
    version remain reachable through item access.

    >>> response = SesshResponse.from_payload({"ok": True, "op": "run", "pid": 7})
    >>> response.ok, response.op
    (True, 'run')
    >>> response["pid"]
    7
    """

    ok: bool
    op: str
    payload: dict[str, t.Any] = dataclasses.field(
        default_factory=dict,
        repr=False,
        compare=False,
    )

    @classmethod
    def _fields_from_payload(
        cls,
        payload: Mapping[str, t.Any],
        stdout: str | None,
    ) -> dict[str, t.Any]:
        return {
            "ok": _field(payload, "ok", bool, stdout),
            "op": _field(payload, "op", str, stdout),
        }

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, t.Any],
        stdout: str | None = None,
    ) -> Self:
        """Build a response from a decoded sessh JSON object.

        *stdout* is the text the payload was decoded from; it is quoted in
        :exc:`sessh.exc.ResponseSchemaError` when a field is missing or has
        the wrong type.
        """
        return cls(payload=dict(payload), **cls._fields_from_payload(payload, stdout))

    def __getitem__(self, key: str) -> t.Any:
        return self.payload[key]

    def get(self, key: str, default: t.Any = None) -> t.Any:
        """Return ``payload[key]``, or *default*."""
        return self.payload.get(key, default)


@dataclasses.dataclass(frozen=True)
class LogsResponse(SesshResponse):
    """Captured terminal text from ``logs`` (scrollback) or ``pane`` (screen).

    >>> response = LogsResponse.from_payload(
    ...     {"ok": True, "op": "logs", "output": "hi\\n", "lines": 1}
    ... )
    >>> response.output
    'hi\\n'
    >>> response.lines
    1
    """

    output: str | None = None
    lines: int | None = None

    @classmethod
    def _fields_from_payload(
        cls,
        payload: Mapping[str, t.Any],
        stdout: str | None,
    ) -> dict[str, t.Any]:
        fields = super()._fields_from_payload(payload, stdout)
        fields["output"] = _field(payload, "output", str, stdout, default=None)
        fields["lines"] = _field(payload, "lines", int, stdout, default=None)
        return fields


@dataclasses.dataclass(frozen=True)
class StatusResponse(SesshResponse):
    """Liveness of the SSH ControlMaster (``master``) and tmux ``session``.

    Each indicator is ``1`` when the resource exists and ``0`` when it does
    not. Both are required on success; a failed status (``"ok": false``) may
    omit them, and they then read as ``0``.

    >>> status = StatusResponse.from_payload(
    ...     {"ok": True, "op": "status", "master": 1, "session": 0}
    ... )
    >>> status.master, status.session
    (1, 0)
    >>> failed = StatusResponse.from_payload(
    ...     {"ok": False, "op": "status", "error": "ssh down"}
    ... )
    >>> failed.ok, failed.master, failed["error"]
    (False, 0, 'ssh down')
    """

    master: int = 0
    session: int = 0

    @classmethod
    def _fields_from_payload(
        cls,
        payload: Mapping[str, t.Any],
        stdout: str | None,
    ) -> dict[str, t.Any]:
        fields = super()._fields_from_payload(payload, stdout)
        default = _REQUIRED if fields["ok"] else 0
        fields["master"] = _field(payload, "master", int, stdout, default)
        fields["session"] = _field(payload, "session", int, stdout, default)
        return fields


__all__ = [
    "LogsResponse",
    "SesshResponse",
    "StatusResponse",
    "parse_response",
]
