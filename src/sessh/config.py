"""Session configuration for sessh clients.

sessh.config
~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses

#: Binary name resolved through ``PATH`` when no explicit path is configured
DEFAULT_SESSH_BIN = "sessh"


@dataclasses.dataclass(frozen=True, slots=True)
class SessionConfig:
    """Immutable settings describing one persistent remote session.

    Construction only assigns fields, it never validates or touches the
    network, so any combination of values is accepted.

    Examples
    --------
    >>> config = SessionConfig(alias="agent", host="user@host")
    >>> config.binary
    'sessh'
    >>> config.port is None
    True

    Use :func:`dataclasses.replace` for variants:

    >>> import dataclasses
    >>> dataclasses.replace(config, port=2222).port
    2222

    Parameters
    ----------
    alias : str
        Name of the remote multiplexed session.
    host : str
        SSH target, e.g. ``user@host``.
    port : int, optional
        SSH port, passed to ``open``, ``status`` and ``close``.
    sessh_bin : str, optional
        Path to the sessh executable. Defaults to ``sessh`` on ``PATH``.
    identity : str, optional
        Private key path, exported to sessh as ``SESSH_IDENTITY``.
    proxyjump : str, optional
        Jump host, exported to sessh as ``SESSH_PROXYJUMP``.
    """

    alias: str
    host: str
    port: int | None = None
    sessh_bin: str | None = None
    identity: str | None = None
    proxyjump: str | None = None

    @property
    def binary(self) -> str:
        """Return the configured sessh executable, or the default name."""
        return self.sessh_bin or DEFAULT_SESSH_BIN


__all__ = ["DEFAULT_SESSH_BIN", "SessionConfig"]
