"""Conftest.py (root-level).

We keep this in root pytest fixtures in pytest's doctest plugin to be available, as well
as avoiding conftest.py from being included in the wheel, in addition to pytest_plugin
for pytester only being available via the root directory.

See "pytest_plugins in non-top-level conftest files" in
https://docs.pytest.org/en/stable/deprecations.html
"""

from __future__ import annotations

import os
import typing as t

import pytest
from _pytest.doctest import DoctestItem

from sessh.client import AsyncSesshClient, SesshClient
from sessh.config import SessionConfig
from sessh.testing import MockEngine, ok, result

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> None:
    """Configure doctest fixtures for pytest-doctest."""
    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["SesshClient"] = SesshClient
        doctest_namespace["AsyncSesshClient"] = AsyncSesshClient
        doctest_namespace["SessionConfig"] = SessionConfig
        doctest_namespace["MockEngine"] = MockEngine
        doctest_namespace["ok"] = ok
        doctest_namespace["result"] = result


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove variables that change what sessh or its tracing sees.

    A developer shell may export ``SESSH_IDENTITY`` or an OTLP endpoint, which
    would leak into the recorded child environment.
    """
    for key in list(os.environ):
        if key.startswith(("SESSH_", "OTEL_")) or key in {
            "TRACEPARENT",
            "TRACESTATE",
            "BAGGAGE",
        }:
            monkeypatch.delenv(key)
