"""Tests for sessh.response."""

from __future__ import annotations

import typing as t

import pytest

from sessh import exc
from sessh.response import LogsResponse, SesshResponse, StatusResponse, parse_response
from sessh.testing import result


def test_parse_response_success() -> None:
    """Exit 0 with a JSON object decodes to that object."""
    payload = parse_response(result(stdout='{"ok":true,"op":"open"}'))
    assert payload == {"ok": True, "op": "open"}


def test_parse_response_nonzero_exit_with_stdout_is_decoded() -> None:
    """A failing exit still decodes a JSON error object on stdout."""
    payload = parse_response(
        result(
            stdout='{"ok":false,"op":"open","error":"ssh failed"}',
            stderr="ignored",
            returncode=255,
        ),
    )
    assert payload["ok"] is False
    assert payload["error"] == "ssh failed"


def test_parse_response_stderr_verbatim() -> None:
    """Non-zero exit and empty stdout raise with stderr as the message."""
    with pytest.raises(exc.SesshCommandError) as excinfo:
        parse_response(result(stderr="connection refused", returncode=1))
    assert str(excinfo.value) == "connection refused"
    assert excinfo.value.returncode == 1
    assert excinfo.value.stderr == "connection refused"


def test_parse_response_generic_exit_message() -> None:
    """Without stderr the message names the exit code."""
    with pytest.raises(exc.SesshCommandError, match="sessh failed with exit code 3"):
        parse_response(result(returncode=3))


class DecodeFailureFixture(t.NamedTuple):
    """Test fixture for test_parse_response_decode_failure()."""

    test_id: str
    stdout: str
    returncode: int


DECODE_FAILURE_FIXTURES: list[DecodeFailureFixture] = [
    DecodeFailureFixture(test_id="plain_text", stdout="not json", returncode=0),
    DecodeFailureFixture(test_id="text_on_failure", stdout="not json", returncode=2),
    DecodeFailureFixture(test_id="truncated", stdout='{"ok": tr', returncode=0),
    DecodeFailureFixture(test_id="array", stdout="[1, 2]", returncode=0),
    DecodeFailureFixture(test_id="scalar", stdout="42", returncode=0),
]


@pytest.mark.parametrize(
    list(DecodeFailureFixture._fields),
    DECODE_FAILURE_FIXTURES,
    ids=[test.test_id for test in DECODE_FAILURE_FIXTURES],
)
def test_parse_response_decode_failure(
    test_id: str,
    stdout: str,
    returncode: int,
) -> None:
    """Anything but a JSON object raises with the raw text included."""
    with pytest.raises(exc.ResponseDecodeError) as excinfo:
        parse_response(result(stdout=stdout, returncode=returncode))
    assert stdout in str(excinfo.value)
    assert excinfo.value.stdout == stdout


def test_parse_response_empty_stdout_on_success() -> None:
    """Exit 0 with nothing printed is not valid JSON."""
    with pytest.raises(exc.ResponseDecodeError, match="Invalid JSON from sessh"):
        parse_response(result())


def test_sessh_response_keeps_extra_keys() -> None:
    """Operation specific keys stay reachable through the payload."""
    response = SesshResponse.from_payload({"ok": True, "op": "run", "pid": 7})
    assert response.ok is True
    assert response.op == "run"
    assert response["pid"] == 7
    assert response.get("missing", "default") == "default"


def test_sessh_response_equality_ignores_payload() -> None:
    """Responses compare on their typed fields."""
    first = SesshResponse.from_payload({"ok": True, "op": "open", "a": 1})
    second = SesshResponse(ok=True, op="open")
    assert first == second


@pytest.mark.parametrize("missing", ["ok", "op"])
def test_sessh_response_requires_ok_and_op(missing: str) -> None:
    """``ok`` and ``op`` are mandatory."""
    payload = {"ok": True, "op": "open"}
    del payload[missing]
    with pytest.raises(exc.ResponseSchemaError, match=missing):
        SesshResponse.from_payload(payload)


def test_logs_response_fields() -> None:
    """Capture responses expose output and line count."""
    response = LogsResponse.from_payload(
        {"ok": True, "op": "logs", "output": "hi\n", "lines": 1},
    )
    assert response.output == "hi\n"
    assert response.lines == 1


def test_logs_response_optional_fields() -> None:
    """Output and lines may be absent."""
    response = LogsResponse.from_payload({"ok": True, "op": "pane"})
    assert response.output is None
    assert response.lines is None


def test_status_response_fields() -> None:
    """Status exposes both liveness indicators as integers."""
    response = StatusResponse.from_payload(
        {"ok": True, "op": "status", "master": 1, "session": 0},
    )
    assert (response.master, response.session) == (1, 0)
    assert isinstance(response, SesshResponse)


@pytest.mark.parametrize("missing", ["master", "session"])
def test_status_response_requires_indicators(missing: str) -> None:
    """A status without both indicators is rejected."""
    payload = {"ok": True, "op": "status", "master": 1, "session": 1}
    del payload[missing]
    with pytest.raises(exc.ResponseSchemaError, match=missing):
        StatusResponse.from_payload(payload)


class SchemaFixture(t.NamedTuple):
    """Test fixture for test_typed_fields_are_checked()."""

    test_id: str
    response_cls: type[SesshResponse]
    payload: dict[str, t.Any]
    reason: str


SCHEMA_FIXTURES: list[SchemaFixture] = [
    SchemaFixture(
        test_id="ok_as_string",
        response_cls=SesshResponse,
        payload={"ok": "false", "op": "open"},
        reason="'ok' must be bool, not str",
    ),
    SchemaFixture(
        test_id="ok_as_int",
        response_cls=SesshResponse,
        payload={"ok": 1, "op": "open"},
        reason="'ok' must be bool, not int",
    ),
    SchemaFixture(
        test_id="op_null",
        response_cls=SesshResponse,
        payload={"ok": True, "op": None},
        reason="'op' must be str, not NoneType",
    ),
    SchemaFixture(
        test_id="lines_as_string",
        response_cls=LogsResponse,
        payload={"ok": True, "op": "logs", "output": "", "lines": "3"},
        reason="'lines' must be int, not str",
    ),
    SchemaFixture(
        test_id="master_as_bool",
        response_cls=StatusResponse,
        payload={"ok": True, "op": "status", "master": True, "session": 0},
        reason="'master' must be int, not bool",
    ),
    SchemaFixture(
        test_id="session_as_float",
        response_cls=StatusResponse,
        payload={"ok": True, "op": "status", "master": 1, "session": 1.5},
        reason="'session' must be int, not float",
    ),
]


@pytest.mark.parametrize(
    list(SchemaFixture._fields),
    SCHEMA_FIXTURES,
    ids=[test.test_id for test in SCHEMA_FIXTURES],
)
def test_typed_fields_are_checked(
    test_id: str,
    response_cls: type[SesshResponse],
    payload: dict[str, t.Any],
    reason: str,
) -> None:
    """Fields with the wrong JSON type raise instead of being coerced."""
    with pytest.raises(exc.ResponseSchemaError) as excinfo:
        response_cls.from_payload(payload)
    assert excinfo.value.reason == reason


def test_schema_error_quotes_raw_stdout() -> None:
    """The text sessh printed is quoted as-is, not re-serialized."""
    stdout = '{ "op": "status",  "ok": true }'
    with pytest.raises(exc.ResponseSchemaError) as excinfo:
        StatusResponse.from_payload(parse_response(result(stdout=stdout)), stdout)
    assert excinfo.value.stdout == stdout
    assert str(excinfo.value) == (
        f"Unexpected response from sessh: {stdout} (missing 'master')"
    )


def test_failed_status_defaults_indicators() -> None:
    """``ok: false`` status objects may omit or null the indicators."""
    response = StatusResponse.from_payload(
        {"ok": False, "op": "status", "master": None, "error": "ssh down"},
    )
    assert response.ok is False
    assert (response.master, response.session) == (0, 0)
    assert response["error"] == "ssh down"


def test_logs_null_output_is_none() -> None:
    """A null capture reads as no output."""
    response = LogsResponse.from_payload(
        {"ok": True, "op": "pane", "output": None, "lines": None},
    )
    assert response.output is None
    assert response.lines is None
