"""Pytest configuration and shared fixtures."""

import logging
import os
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from openai_assistants_mcp.config import AppConfig, ProviderConfig, RegistryConfig
from openai_assistants_mcp.providers.base import (
    Provider,
    ProviderFactory,
    ProviderMetadata,
)
from openai_assistants_mcp.errors import ProviderConfigError

# Disable logging during tests to reduce noise
logging.disable(logging.CRITICAL)


ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_ORGANIZATION",
    "OPENAI_PROJECT",
    "MCP_DEFAULT_PROVIDER",
    "MCP_PROVIDER_TIMEOUT",
    "MCP_LAZY_INITIALIZE",
    "MCP_HEALTH_POLICY",
    "MCP_HEALTH_CHECK_ON_STARTUP",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Clean environment variables and keep config discovery away from real files."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield


def make_provider(name: str = "fake", healthy: bool = True) -> MagicMock:
    """Create a Provider mock whose entity operations are AsyncMocks."""
    provider = MagicMock(spec=Provider)
    provider.name = name
    provider.metadata = ProviderMetadata(name=name, display_name=name.title(), version="1.0.0")
    provider.validate_connection = AsyncMock(return_value=healthy)
    provider.close = AsyncMock()
    return provider


class FakeProviderFactory(ProviderFactory):
    """Factory producing provider mocks; rejects configs without an api_key."""

    def __init__(self, name: str = "fake", healthy: bool = True):
        self._metadata = ProviderMetadata(name=name, display_name=name.title(), version="1.0.0")
        self.healthy = healthy
        self.created = []

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    def validate_config(self, config: ProviderConfig) -> None:
        if not config.credentials.get("api_key"):
            raise ProviderConfigError(self.name, "credentials.api_key is required")

    def create(self, config: ProviderConfig) -> Provider:
        provider = make_provider(self.name, healthy=self.healthy)
        self.created.append(provider)
        return provider


@pytest.fixture
def fake_provider():
    return make_provider()


@pytest.fixture
def registry_config():
    return RegistryConfig(
        providers=[ProviderConfig(provider_name="fake", credentials={"api_key": "sk-test"})]
    )


@pytest.fixture
def app_config(registry_config):
    return AppConfig(registry=registry_config)


@pytest.fixture
def sample_assistant() -> Dict[str, Any]:
    return {
        "id": "asst_abc123",
        "object": "assistant",
        "created_at": 1699009709,
        "name": "Math Tutor",
        "model": "gpt-4o",
        "instructions": "You are a personal math tutor.",
        "tools": [{"type": "code_interpreter"}],
        "metadata": {},
    }


@pytest.fixture
def sample_run() -> Dict[str, Any]:
    return {
        "id": "run_abc123",
        "object": "thread.run",
        "thread_id": "thread_abc123",
        "assistant_id": "asst_abc123",
        "status": "queued",
    }
