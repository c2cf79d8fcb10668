from __future__ import annotations

import pytest

from ara_config.settings import AraSettings
from ara_mcp.aggregator import PlaybookAggregator
from ara_mcp.core_infrastructure.http_client import AraHttpClient
from tests.helpers.fake_ara import BASE, FakeSession
from tests.helpers.mcp_runtime import build_test_env, mcp_stdio_session


@pytest.fixture(autouse=True)
def _quiet_telemetry(monkeypatch):
    """Keep unit tests from appending to a developer's telemetry file."""
    monkeypatch.delenv("ARA_TELEMETRY_FILE", raising=False)


@pytest.fixture()
def settings() -> AraSettings:
    return AraSettings(api_server=BASE)


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def client(settings, session) -> AraHttpClient:
    return AraHttpClient(settings, session=session)


@pytest.fixture()
def aggregator(client) -> PlaybookAggregator:
    return PlaybookAggregator(client)


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
async def gateway_session(anyio_backend, tmp_path):
    """Initialized session for the ARA gateway MCP server (stdio transport).

    Points at a closed local port so no real ARA server is contacted.
    """
    env = build_test_env(tmp_path, extra={"ARA_API_SERVER": "http://127.0.0.1:9"})
    async with mcp_stdio_session("ara_mcp.gateway", env=env) as session:
        yield session
