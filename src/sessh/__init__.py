"""sessh, a typed Python client for persistent SSH + tmux sessions.

The heavy lifting (SSH ControlMaster reuse, tmux lifecycle, output capture)
happens in the ``sessh`` CLI; this package invokes it with ``SESSH_JSON=1``
and returns typed responses.
"""

from __future__ import annotations

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .client import AsyncSesshClient, SesshClient
from .config import SessionConfig
from .response import LogsResponse, SesshResponse, StatusResponse

__all__ = (
    "AsyncSesshClient",
    "LogsResponse",
    "SessionConfig",
    "SesshClient",
    "SesshResponse",
    "StatusResponse",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
)
