"""Pytest configuration and fixtures for walrus_mcp tests.

No test reaches the network: HTTP is served by httpx.MockTransport.
"""

from __future__ import annotations

import pytest

from walrus_mcp.config import ENV_VARS, GatewayConfig
from walrus_mcp.logging_setup import WALRUS_MCP_LOG_LEVEL_ENV

TEST_AGGREGATOR_URL = "https://aggregator.test"
TEST_PUBLISHER_URL = "https://publisher.test"
TEST_SYSTEM_OBJECT = "0xsystem"


@pytest.fixture(autouse=True)
def clear_walrus_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove WALRUS_* variables so host settings cannot leak into tests."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv(WALRUS_MCP_LOG_LEVEL_ENV, raising=False)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Config pointing at the mock endpoints."""
    return GatewayConfig(
        aggregator_url=TEST_AGGREGATOR_URL,
        publisher_url=TEST_PUBLISHER_URL,
        system_object=TEST_SYSTEM_OBJECT,
        timeout_seconds=5.0,
    )
