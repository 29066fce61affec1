"""Shared fixtures for all tests."""

from unittest.mock import MagicMock

import pytest

from pldbot.chat.gateway import ChatGateway, Principal
from pldbot.core import database
from pldbot.core.config import GatewayConfig
from pldbot.core.llm_adapter import ModelAdapter
from pldbot.core.recorder import UsageRecorder


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(api_key="test-gemini-key")


@pytest.fixture
def principal() -> Principal:
    return Principal(id="tenant-123")


@pytest.fixture
def mock_adapter() -> MagicMock:
    """Model adapter stub that always answers."""
    adapter = MagicMock(spec=ModelAdapter)
    adapter.invoke.return_value = "Para inmuebles se presenta Aviso por cualquier monto."
    adapter.is_healthy.return_value = True
    return adapter


@pytest.fixture
def mock_recorder() -> MagicMock:
    return MagicMock(spec=UsageRecorder)


@pytest.fixture
def gateway(gateway_config, mock_adapter, mock_recorder) -> ChatGateway:
    return ChatGateway(gateway_config, mock_adapter, mock_recorder)


@pytest.fixture
def sqlite_db(tmp_path):
    """Fresh file-backed SQLite store, shareable across worker threads."""
    database.init_db(f"sqlite:///{tmp_path / 'pldbot-test.sqlite'}")
    yield
