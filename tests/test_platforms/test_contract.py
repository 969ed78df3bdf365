# ABOUTME: Behaviour every platform adapter must share.
# ABOUTME: Parametrized over all registered adapters with a config file under tmp_path.
from pathlib import Path

import pytest

from mcp_installer.context import OperationContext
from mcp_installer.errors import (
    ConfigInvalidError,
    OperationCancelledError,
    ServerAlreadyExistsError,
    ServerNotFoundError,
)
from mcp_installer.models import InstallerAdapter, MCPServer, ServerSettings, Vertical, new_kirha_server
from mcp_installer.platforms import ALL_PLATFORMS

CONFIG_FILES = {
    "claude": "claude_desktop_config.json",
    "claudecode": ".claude.json",
    "cursor": "mcp.json",
    "vscode": "settings.json",
    "codex": "config.toml",
    "gemini": "settings.json",
    "opencode": "opencode.json",
    "docker": "docker-compose.yml",
}


@pytest.fixture(params=list(ALL_PLATFORMS), ids=lambda client: client.value)
def adapter(request, tmp_path: Path):
    adapter_cls = ALL_PLATFORMS[request.param]
    return adapter_cls(config_path=tmp_path / CONFIG_FILES[request.param.value])


@pytest.fixture
def ctx() -> OperationContext:
    return OperationContext()


def kirha(adapter, settings, api_key, vertical=Vertical.CRYPTO) -> MCPServer:
    return new_kirha_server(api_key, vertical, settings, transport=adapter.transport)


def foreign(adapter) -> MCPServer:
    if adapter.transport == "http":
        return MCPServer(name="docs", type="http", url="https://docs.example.com/mcp",
                         headers={"X-Team": "core"})
    return MCPServer(name="github", type="stdio", command="npx",
                     args=["-y", "@modelcontextprotocol/server-github"],
                     env={"GITHUB_TOKEN": "ghp_xxxx"})


def test_implements_protocol(adapter):
    assert isinstance(adapter, InstallerAdapter)
    assert adapter.name
    assert adapter.transport in ("stdio", "http")


def test_load_missing_file_is_empty(adapter, ctx, settings):
    """Loading a missing file is not an error and creates nothing."""
    config = adapter.load_config(ctx)

    assert not adapter.has_mcp_server(config, settings.identity(Vertical.CRYPTO))
    assert not adapter.get_config_path().exists()
    # Loading twice gives the same result
    assert adapter.load_config(ctx) == config


def test_load_blank_file_is_empty(adapter, ctx):
    adapter.get_config_path().write_text("\n")
    assert adapter.load_config(ctx) == adapter.load_config(ctx)


def test_add_returns_copy(adapter, ctx, settings, api_key):
    config = adapter.load_config(ctx)
    snapshot = repr(config)

    updated = adapter.add_mcp_server(config, kirha(adapter, settings, api_key))

    assert adapter.has_mcp_server(updated, settings.identity(Vertical.CRYPTO))
    assert repr(config) == snapshot


def test_at_most_one_entry_per_identity(adapter, ctx, settings, api_key):
    server = kirha(adapter, settings, api_key)
    config = adapter.add_mcp_server(adapter.load_config(ctx), server)

    with pytest.raises(ServerAlreadyExistsError):
        adapter.add_mcp_server(config, server)


def test_verticals_are_separate_identities(adapter, ctx, settings, api_key):
    config = adapter.load_config(ctx)
    config = adapter.add_mcp_server(config, kirha(adapter, settings, api_key, Vertical.CRYPTO))
    config = adapter.add_mcp_server(config, kirha(adapter, settings, api_key, Vertical.UTILS))

    assert adapter.has_mcp_server(config, settings.identity(Vertical.CRYPTO))
    assert adapter.has_mcp_server(config, settings.identity(Vertical.UTILS))
    assert not adapter.has_mcp_server(config, settings.identity(None))


def test_save_load_round_trip(adapter, ctx, settings, api_key):
    server = kirha(adapter, settings, api_key)
    adapter.save_config(ctx, adapter.add_mcp_server(adapter.load_config(ctx), server))

    reloaded = adapter.load_config(ctx)

    adapter.validate_config(reloaded)
    assert adapter.get_mcp_server_config(reloaded, settings.identity(Vertical.CRYPTO)) == server


def test_add_then_remove_preserves_unrelated_entries(adapter, ctx, settings, api_key):
    adapter.save_config(ctx, adapter.add_mcp_server(adapter.load_config(ctx), foreign(adapter)))
    original = adapter.load_config(ctx)

    added = adapter.add_mcp_server(original, kirha(adapter, settings, api_key))
    removed = adapter.remove_mcp_server(added, settings.identity(Vertical.CRYPTO))

    assert removed == original


def test_remove_missing_raises(adapter, ctx, settings):
    with pytest.raises(ServerNotFoundError):
        adapter.remove_mcp_server(adapter.load_config(ctx), settings.identity(Vertical.CRYPTO))


def test_get_missing_raises(adapter, ctx, settings):
    with pytest.raises(ServerNotFoundError):
        adapter.get_mcp_server_config(adapter.load_config(ctx), settings.identity(Vertical.UTILS))


def test_backup_and_restore(adapter, ctx, settings, api_key):
    assert adapter.backup_config(ctx) is None

    adapter.save_config(ctx, adapter.add_mcp_server(adapter.load_config(ctx), foreign(adapter)))
    original = adapter.get_config_path().read_bytes()
    backup_path = adapter.backup_config(ctx)

    adapter.get_config_path().write_text("garbage: [")
    adapter.restore_config(ctx, backup_path)

    assert adapter.get_config_path().read_bytes() == original


def test_restore_none_is_noop(adapter, ctx):
    adapter.restore_config(ctx, None)
    assert not adapter.get_config_path().exists()


def test_validate_rejects_non_mapping_container(adapter):
    with pytest.raises(ConfigInvalidError):
        adapter.validate_config({adapter.container_key: ["not", "a", "mapping"]})
    with pytest.raises(ConfigInvalidError):
        adapter.validate_config(["not", "a", "mapping"])


def test_format_masks_credentials(adapter, ctx, settings, api_key):
    config = adapter.load_config(ctx)
    config = adapter.add_mcp_server(config, kirha(adapter, settings, api_key))
    config = adapter.add_mcp_server(config, foreign(adapter))

    listing = adapter.format_config(config)
    own_only = adapter.format_config(config, only_own=True)
    specific = adapter.format_specific_server(config, settings.identity(Vertical.CRYPTO))

    for text in (listing, own_only, specific):
        assert api_key not in text
        assert "abcd****efgh" in text
    assert "=== Kirha MCP Servers ===" in listing
    assert "=== Other MCP Servers ===" in listing
    assert "Other MCP Servers" not in own_only
    assert "Server: kirha-crypto" in specific


def test_format_empty(adapter, ctx):
    config = adapter.load_config(ctx)
    assert adapter.format_config(config) == "No MCP servers configured"
    assert adapter.format_config(config, only_own=True) == "No Kirha MCP servers configured"


def test_cancelled_context_blocks_io(adapter, settings):
    ctx = OperationContext()
    ctx.cancel()

    with pytest.raises(OperationCancelledError):
        adapter.load_config(ctx)
    assert not adapter.get_config_path().exists()


def test_custom_settings_change_identity(tmp_path, ctx, api_key):
    settings = ServerSettings(base_name="acme", display_name="Acme")
    for client, adapter_cls in ALL_PLATFORMS.items():
        adapter = adapter_cls(config_path=tmp_path / client.value / CONFIG_FILES[client.value],
                              settings=settings)
        server = new_kirha_server(api_key, Vertical.UTILS, settings, transport=adapter.transport)
        config = adapter.add_mcp_server(adapter.load_config(ctx), server)

        assert adapter.has_mcp_server(config, settings.identity(Vertical.UTILS))
        assert "=== Acme MCP Servers ===" in adapter.format_config(config)
