"""Shared fixtures for sessh tests.

The ``fake_sessh``, ``sessh_config``, ``sessh_client`` and
``async_sessh_client`` fixtures come from :mod:`sessh.pytest_plugin`.
"""

from __future__ import annotations

import pytest

from sessh.client import AsyncSesshClient, SesshClient
from sessh.testing import MockEngine


@pytest.fixture
def mock_engine() -> MockEngine:
    """Return an empty :class:`MockEngine`."""
    return MockEngine()


@pytest.fixture
def mock_client(mock_engine: MockEngine) -> SesshClient:
    """Return a blocking client recording into :func:`mock_engine`."""
    return SesshClient("agent", "user@host", engine=mock_engine)


@pytest.fixture
def async_mock_client(mock_engine: MockEngine) -> AsyncSesshClient:
    """Return an asyncio client recording into :func:`mock_engine`."""
    return AsyncSesshClient("agent", "user@host", engine=mock_engine)
