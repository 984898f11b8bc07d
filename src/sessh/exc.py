"""Provide exceptions used by sessh.

sessh.exc
~~~~~~~~~

Every failure the client can surface inherits from :exc:`SesshException`, so
callers wanting a single ``except`` clause can catch that. Nothing in sessh
recovers from these locally; they are raised to the immediate caller.
"""

from __future__ import annotations


class SesshException(Exception):
    """Base exception for all sessh errors."""


class SesshCommandNotFound(SesshException):
    """Raised when the sessh binary cannot be found or executed.

    >>> str(SesshCommandNotFound("sessh"))
    'sessh binary not found: sessh'
    """

    def __init__(self, sessh_bin: str | None = None) -> None:
        self.sessh_bin = sessh_bin
        if sessh_bin is not None:
            super().__init__(f"sessh binary not found: {sessh_bin}")
        else:
            super().__init__("sessh binary not found")


class SesshCommandError(SesshException):
    """Raised when sessh exits non-zero without writing anything to stdout.

    The message is stderr verbatim when there is any.

    >>> str(SesshCommandError(stdout="", stderr="connection refused", returncode=255))
    'connection refused'
    >>> str(SesshCommandError(stdout="", stderr="", returncode=2))
    'sessh failed with exit code 2'
    """

    def __init__(self, *, stdout: str, stderr: str, returncode: int) -> None:
        message = stderr or f"sessh failed with exit code {returncode}"
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class ResponseDecodeError(SesshException, ValueError):
    """Raised when sessh output is not the expected JSON object.

    >>> str(ResponseDecodeError("not json"))
    'Invalid JSON from sessh: not json'
    """

    prefix = "Invalid JSON from sessh"

    def __init__(self, stdout: str, reason: str | None = None) -> None:
        message = f"{self.prefix}: {stdout}"
        if reason is not None:
            message += f" ({reason})"
        super().__init__(message)
        self.stdout = stdout
        self.reason = reason


class ResponseSchemaError(ResponseDecodeError):
    """Raised when sessh printed a JSON object with missing or mistyped fields.

    >>> print(ResponseSchemaError('{"ok": true}', reason="missing 'op'"))
    Unexpected response from sessh: {"ok": true} (missing 'op')
    """

    prefix = "Unexpected response from sessh"


class AttachNotSupported(SesshException, NotImplementedError):
    """Raised by ``attach()``, which needs an inherited terminal, not pipes."""

    def __init__(self, alias: str | None = None, host: str | None = None) -> None:
        hint = "sessh attach"
        if alias is not None and host is not None:
            hint += f" {alias} {host}"
        super().__init__(f"Interactive attach not supported via SDK. Use CLI: {hint}")


__all__ = [
    "AttachNotSupported",
    "ResponseDecodeError",
    "ResponseSchemaError",
    "SesshCommandError",
    "SesshCommandNotFound",
    "SesshException",
]
