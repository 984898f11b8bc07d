"""sessh pytest plugin.

Provides a stand-in ``sessh`` executable so clients can be exercised through a
real child process without SSH or tmux. The stand-in records the arguments and
``SESSH_*`` environment of every call and replays scripted output.

Fixtures
--------
fake_sessh
    :class:`FakeSessh` writing into a per-test temporary directory.
sessh_config
    :class:`sessh.config.SessionConfig` pointing at ``fake_sessh``.
sessh_client, async_sessh_client
    Clients built from ``sessh_config``.
sessh_on_path
    Puts ``fake_sessh`` first on ``PATH`` so the default ``sessh`` resolves to it.
"""

from __future__ import annotations

import json
import os
import stat
import sys
import typing as t
from dataclasses import dataclass

import pytest

from sessh.client import AsyncSesshClient, SesshClient
from sessh.config import SessionConfig

if t.TYPE_CHECKING:
    import pathlib


#: Alias used by the default :func:`sessh_config`
TEST_ALIAS = "agent"

#: Host used by the default :func:`sessh_config`
TEST_HOST = "user@host"

_RECORDED_ENV = ("TRACEPARENT", "TRACESTATE", "BAGGAGE")

_FAKE_SESSH_BODY = """
import json
import os
import pathlib
import sys

state = pathlib.Path(__file__).resolve().parent
args = sys.argv[1:]
env = {
    key: value
    for key, value in os.environ.items()
    if key.startswith("SESSH_") or key in %(recorded)r
}
with (state / "calls.jsonl").open("a", encoding="utf-8") as fh:
    fh.write(json.dumps({"args": args, "env": env}) + "\\n")

responses = json.loads((state / "responses.json").read_text(encoding="utf-8"))
op = args[0] if args else ""
response = responses.get(op) or responses.get("*") or {
    "stdout": json.dumps({"ok": True, "op": op}),
    "stderr": "",
    "returncode": 0,
}
sys.stdout.write(response["stdout"])
sys.stderr.write(response["stderr"])
sys.exit(response["returncode"])
"""


@dataclass(frozen=True)
class FakeSesshCall:
    """Arguments and ``SESSH_*`` environment seen by one fake sessh run."""

    args: list[str]
    env: dict[str, str]


class FakeSessh:
    """Executable stand-in for the sessh CLI.

    Unscripted operations print ``{"ok": true, "op": <op>}`` and exit 0.
    """

    def __init__(self, directory: pathlib.Path) -> None:
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        self._responses: dict[str, dict[str, t.Any]] = {}
        self._write_responses()
        self.path.write_text(
            f"#!{sys.executable}\n"
            + _FAKE_SESSH_BODY % {"recorded": _RECORDED_ENV},
            encoding="utf-8",
        )
        mode = self.path.stat().st_mode
        self.path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def __repr__(self) -> str:
        return f"FakeSessh({str(self.path)!r})"

    @property
    def path(self) -> pathlib.Path:
        """Location of the executable."""
        return self.directory / "sessh"

    @property
    def calls_file(self) -> pathlib.Path:
        return self.directory / "calls.jsonl"

    def _write_responses(self) -> None:
        (self.directory / "responses.json").write_text(
            json.dumps(self._responses),
            encoding="utf-8",
        )

    def respond(
        self,
        op: str = "*",
        *,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> None:
        """Script raw output for *op*; ``"*"`` applies to every operation."""
        self._responses[op] = {
            "stdout": stdout,
            "stderr": stderr,
            "returncode": returncode,
        }
        self._write_responses()

    def respond_json(self, op: str, *, returncode: int = 0, **fields: t.Any) -> None:
        """Script a JSON object ``{"ok": true, "op": op, **fields}`` for *op*."""
        payload = {"ok": True, "op": op, **fields}
        self.respond(op, stdout=json.dumps(payload), returncode=returncode)

    @property
    def calls(self) -> list[FakeSesshCall]:
        """Every recorded invocation, oldest first."""
        if not self.calls_file.exists():
            return []
        with self.calls_file.open(encoding="utf-8") as fh:
            return [FakeSesshCall(**json.loads(line)) for line in fh if line.strip()]


@pytest.fixture
def fake_sessh(tmp_path: pathlib.Path) -> FakeSessh:
    """Return a fresh :class:`FakeSessh` in the test's temporary directory."""
    return FakeSessh(tmp_path / "sessh-bin")


@pytest.fixture
def sessh_on_path(fake_sessh: FakeSessh, monkeypatch: pytest.MonkeyPatch) -> FakeSessh:
    """Make a bare ``sessh`` resolve to :func:`fake_sessh`."""
    path = os.environ.get("PATH", "")
    monkeypatch.setenv("PATH", os.pathsep.join([str(fake_sessh.directory), path]))
    return fake_sessh


@pytest.fixture
def sessh_config(fake_sessh: FakeSessh) -> SessionConfig:
    """Return a :class:`SessionConfig` wired to :func:`fake_sessh`."""
    return SessionConfig(
        alias=TEST_ALIAS,
        host=TEST_HOST,
        sessh_bin=str(fake_sessh.path),
    )


@pytest.fixture
def sessh_client(sessh_config: SessionConfig) -> SesshClient:
    """Return a blocking client wired to :func:`fake_sessh`."""
    return SesshClient.from_config(sessh_config)


@pytest.fixture
def async_sessh_client(sessh_config: SessionConfig) -> AsyncSesshClient:
    """Return an asyncio client wired to :func:`fake_sessh`."""
    return AsyncSesshClient.from_config(sessh_config)
