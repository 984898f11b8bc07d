"""Helpers shared by the sessh clients.

sessh.common
~~~~~~~~~~~~

Builds the two halves of every invocation: the positional argument list
understood by the sessh CLI and the environment the child process runs in.
"""

from __future__ import annotations

import os
import typing as t

from .otel import trace_env

if t.TYPE_CHECKING:
    from collections.abc import Mapping

    from .config import SessionConfig


#: Forces sessh to answer with a single JSON object on stdout
SESSH_JSON_ENV = "SESSH_JSON"

#: Private key handed to ``ssh -i``
SESSH_IDENTITY_ENV = "SESSH_IDENTITY"

#: Jump host handed to ``ssh -J``
SESSH_PROXYJUMP_ENV = "SESSH_PROXYJUMP"

#: Lines captured by ``logs`` and ``pane`` unless told otherwise
DEFAULT_LINES = 300

#: Ends option parsing so commands starting with ``-`` reach the session as-is
ARG_SEPARATOR = "--"


def build_args(
    op: str,
    config: SessionConfig,
    *operands: str | int,
    include_port: bool = False,
) -> list[str]:
    """Return the sessh argument list for *op*.

    Examples
    --------
    >>> from sessh.config import SessionConfig
    >>> config = SessionConfig(alias="agent", host="user@host", port=2222)
    >>> build_args("logs", config, 50)
    ['logs', 'agent', 'user@host', '50']
    >>> build_args("run", config, ARG_SEPARATOR, "ls -la")
    ['run', 'agent', 'user@host', '--', 'ls -la']
    >>> build_args("open", config, include_port=True)
    ['open', 'agent', 'user@host', '2222']
    """
    args = [op, config.alias, config.host]
    args += [str(operand) for operand in operands]
    if include_port and config.port:
        args.append(str(config.port))
    return args


def build_env(
    config: SessionConfig,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the child environment for a sessh invocation.

    The caller's environment is inherited. ``SESSH_JSON`` is always set;
    identity and jump host only appear when configured.

    Examples
    --------
    >>> from sessh.config import SessionConfig
    >>> env = build_env(SessionConfig(alias="a", host="h"), base={"HOME": "/root"})
    >>> env
    {'HOME': '/root', 'SESSH_JSON': '1'}
    >>> env = build_env(
    ...     SessionConfig(alias="a", host="h", identity="~/.ssh/id_ed25519"),
    ...     base={},
    ... )
    >>> env["SESSH_IDENTITY"]
    '~/.ssh/id_ed25519'
    """
    env = dict(os.environ if base is None else base)
    env.update(trace_env())
    env[SESSH_JSON_ENV] = "1"
    if config.identity:
        env[SESSH_IDENTITY_ENV] = config.identity
    if config.proxyjump:
        env[SESSH_PROXYJUMP_ENV] = config.proxyjump
    return env


def build_cmd(config: SessionConfig, args: list[str]) -> list[str]:
    """Prefix *args* with the configured sessh executable.

    >>> from sessh.config import SessionConfig
    >>> build_cmd(SessionConfig(alias="a", host="h"), ["status", "a", "h"])
    ['sessh', 'status', 'a', 'h']
    """
    return [config.binary, *args]


def check_lines(lines: int) -> int:
    """Raise :exc:`TypeError` unless *lines* is an integer.

    >>> check_lines(50)
    50
    >>> check_lines("50")
    Traceback (most recent call last):
    ...
    TypeError: lines must be int, not str
    """
    if isinstance(lines, bool) or not isinstance(lines, int):
        msg = f"lines must be int, not {type(lines).__name__}"
        raise TypeError(msg)
    return lines


def check_text(name: str, value: str) -> str:
    """Raise :exc:`TypeError` unless *value* is a string.

    >>> check_text("command", "uptime")
    'uptime'
    """
    if not isinstance(value, str):
        msg = f"{name} must be str, not {type(value).__name__}"
        raise TypeError(msg)
    return value


__all__ = [
    "ARG_SEPARATOR",
    "DEFAULT_LINES",
    "SESSH_IDENTITY_ENV",
    "SESSH_JSON_ENV",
    "SESSH_PROXYJUMP_ENV",
    "build_args",
    "build_cmd",
    "build_env",
    "check_lines",
    "check_text",
]
