"""Tests for the subprocess engine, using the fake sessh executable."""

from __future__ import annotations

import os
import signal
import sys
import typing as t

import pytest

from sessh import exc
from sessh.engines import CommandResult, SubprocessEngine

if t.TYPE_CHECKING:
    import pathlib

    from sessh.pytest_plugin import FakeSessh


def test_run_collects_trimmed_output(fake_sessh: FakeSessh) -> None:
    """stdout and stderr are captured and trimmed."""
    fake_sessh.respond("open", stdout='\n{"ok":true,"op":"open"}\n', stderr="  warn \n")
    engine = SubprocessEngine()
    result = engine.run([str(fake_sessh.path), "open", "agent", "user@host"], env={})
    assert isinstance(result, CommandResult)
    assert result.stdout == '{"ok":true,"op":"open"}'
    assert result.stderr == "warn"
    assert result.returncode == 0
    assert result.cmd[1:] == ["open", "agent", "user@host"]


def test_run_reports_exit_code(fake_sessh: FakeSessh) -> None:
    """A failing exit is reported, not raised."""
    fake_sessh.respond(stderr="connection refused", returncode=255)
    result = SubprocessEngine().run([str(fake_sessh.path), "status", "a", "h"], env={})
    assert result.returncode == 255
    assert result.stderr == "connection refused"
    assert result.stdout == ""


def test_run_passes_environment(fake_sessh: FakeSessh) -> None:
    """The child sees exactly the provided environment."""
    env = {"PATH": os.environ.get("PATH", ""), "SESSH_JSON": "1"}
    SubprocessEngine().run([str(fake_sessh.path), "open", "a", "h"], env=env)
    (call,) = fake_sessh.calls
    assert call.env == {"SESSH_JSON": "1"}


def test_run_resolves_bare_name_on_path(
    sessh_on_path: FakeSessh,
) -> None:
    """A bare ``sessh`` is looked up on the child PATH."""
    env = {"PATH": os.environ["PATH"]}
    result = SubprocessEngine().run(["sessh", "open", "a", "h"], env=env)
    assert result.returncode == 0
    assert result.cmd[0] == str(sessh_on_path.path)
    assert sessh_on_path.calls[0].args == ["open", "a", "h"]


def test_run_binary_not_found(tmp_path: pathlib.Path) -> None:
    """A missing binary raises before anything is spawned."""
    missing = tmp_path / "sessh"
    with pytest.raises(exc.SesshCommandNotFound) as excinfo:
        SubprocessEngine().run([str(missing), "open", "a", "h"], env={})
    assert str(missing) in str(excinfo.value)


def test_run_binary_not_executable(tmp_path: pathlib.Path) -> None:
    """A file without the executable bit is not a sessh binary."""
    script = tmp_path / "sessh"
    script.write_text("#!/bin/sh\n", encoding="utf-8")
    script.chmod(0o644)
    with pytest.raises(exc.SesshCommandNotFound):
        SubprocessEngine().run([str(script), "open", "a", "h"], env={})


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_run_signal_exit_treated_as_zero(tmp_path: pathlib.Path) -> None:
    """A child killed by a signal reports exit code 0."""
    script = tmp_path / "sessh"
    script.write_text(
        f"#!{sys.executable}\n"
        "import os, signal, sys\n"
        "sys.stdout.write('{\"ok\": true, \"op\": \"open\"}')\n"
        "sys.stdout.flush()\n"
        f"os.kill(os.getpid(), {int(signal.SIGTERM)})\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    result = SubprocessEngine().run([str(script), "open", "a", "h"], env={})
    assert result.returncode == 0
    assert result.stdout == '{"ok": true, "op": "open"}'


def test_run_decodes_invalid_utf8(tmp_path: pathlib.Path) -> None:
    """Undecodable bytes are escaped rather than raising."""
    script = tmp_path / "sessh"
    script.write_text(
        f"#!{sys.executable}\n"
        "import sys\n"
        "sys.stdout.buffer.write(b'caf\\xe9')\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    result = SubprocessEngine().run([str(script), "logs", "a", "h", "1"], env={})
    assert result.stdout == "caf\\xe9"


def test_run_does_not_inherit_stdin(fake_sessh: FakeSessh) -> None:
    """stdin is a pipe closed after spawn, so reads see EOF instead of blocking."""
    script = fake_sessh.directory / "reader"
    script.write_text(
        f"#!{sys.executable}\n"
        "import json, sys\n"
        "data = sys.stdin.read()\n"
        "print(json.dumps({'ok': True, 'op': 'run', 'stdin': data}))\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    result = SubprocessEngine().run([str(script), "run", "a", "h"], env={})
    assert '"stdin": ""' in result.stdout


@pytest.mark.asyncio
async def test_arun_collects_output(fake_sessh: FakeSessh) -> None:
    """The asyncio path returns the same result shape."""
    fake_sessh.respond_json("pane", output="$ ", lines=1)
    result = await SubprocessEngine().arun(
        [str(fake_sessh.path), "pane", "agent", "user@host", "300"],
        env={"SESSH_JSON": "1"},
    )
    assert result.returncode == 0
    assert '"output": "$ "' in result.stdout
    assert fake_sessh.calls[0].env == {"SESSH_JSON": "1"}


@pytest.mark.asyncio
async def test_arun_reports_exit_code(fake_sessh: FakeSessh) -> None:
    """A failing exit is reported by the asyncio path too."""
    fake_sessh.respond(stderr="no route to host", returncode=1)
    result = await SubprocessEngine().arun(
        [str(fake_sessh.path), "open", "agent", "user@host"],
        env={},
    )
    assert result.returncode == 1
    assert result.stderr == "no route to host"


@pytest.mark.asyncio
async def test_arun_binary_not_found(tmp_path: pathlib.Path) -> None:
    """The asyncio path raises the same not-found error."""
    with pytest.raises(exc.SesshCommandNotFound):
        await SubprocessEngine().arun([str(tmp_path / "nope"), "open", "a", "h"], env={})
