# Tests for the adapter registry
from pathlib import Path

import pytest

from mcp_installer.errors import ClientNotSupportedError
from mcp_installer.models import ClientType, ServerSettings
from mcp_installer.platforms import (
    ALL_PLATFORMS,
    AdapterRegistry,
    CodexAdapter,
    default_registry,
)


def test_every_client_has_an_adapter():
    assert set(ALL_PLATFORMS) == set(ClientType)
    for client, adapter_cls in ALL_PLATFORMS.items():
        assert adapter_cls.client is client


def test_get_passes_path_and_settings(tmp_path: Path):
    settings = ServerSettings(base_name="acme")
    registry = default_registry(settings)

    adapter = registry.get(ClientType.CODEX, tmp_path / "config.toml")

    assert isinstance(adapter, CodexAdapter)
    assert adapter.get_config_path() == tmp_path / "config.toml"
    assert adapter.settings is settings


def test_unregistered_client():
    registry = AdapterRegistry(adapters={})
    with pytest.raises(ClientNotSupportedError):
        registry.get(ClientType.CURSOR)


def test_register_custom_factory():
    registry = AdapterRegistry(adapters={})
    registry.register(ClientType.CODEX, CodexAdapter)
    assert registry.clients() == [ClientType.CODEX]
