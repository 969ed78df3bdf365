# Tests for Claude Desktop platform adapter
import json
import re
from pathlib import Path

from mcp_installer.context import OperationContext
from mcp_installer.models import RunState, Vertical, new_kirha_server
from mcp_installer.platforms.claude import LINUX_DESKTOP_PATTERN, ClaudeAdapter


def test_claude_adapter_properties(tmp_path: Path) -> None:
    """Test adapter name and config path override."""
    config_file = tmp_path / "claude_desktop_config.json"
    adapter = ClaudeAdapter(config_path=config_file)

    assert adapter.name == "Claude Desktop"
    assert adapter.transport == "stdio"
    assert adapter.get_config_path() == config_file


def test_claude_default_path_linux(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    path = ClaudeAdapter().get_config_path()

    assert path == tmp_path / "xdg" / "Claude" / "claude_desktop_config.json"


def test_claude_default_path_macos(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("sys.platform", "darwin")
    monkeypatch.setenv("HOME", str(tmp_path))

    path = ClaudeAdapter().get_config_path()

    assert path == tmp_path / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"


def test_claude_default_path_windows(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("sys.platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))

    path = ClaudeAdapter().get_config_path()

    assert path == tmp_path / "Roaming" / "Claude" / "claude_desktop_config.json"


def test_claude_load_servers(tmp_path: Path) -> None:
    """Test loading existing servers from config."""
    config_file = tmp_path / "claude_desktop_config.json"
    config_file.write_text(
        """{
  "mcpServers": {
    "filesystem": {
      "command": "npx",
      "args": ["-y", "@modelcontextprotocol/server-filesystem", "/projects"]
    }
  },
  "globalShortcut": "Ctrl+Space"
}"""
    )

    adapter = ClaudeAdapter(config_path=config_file)
    config = adapter.load_config(OperationContext())

    assert config["globalShortcut"] == "Ctrl+Space"
    listing = adapter.format_config(config)
    assert "Server: filesystem" in listing
    assert "  Command: npx" in listing


def test_claude_entry_shape(tmp_path: Path, settings, api_key) -> None:
    """Test that saved entries carry command/args/env without a type field."""
    config_file = tmp_path / "claude_desktop_config.json"
    adapter = ClaudeAdapter(config_path=config_file)
    ctx = OperationContext()

    server = new_kirha_server(api_key, Vertical.CRYPTO, settings)
    adapter.save_config(ctx, adapter.add_mcp_server(adapter.load_config(ctx), server))

    data = json.loads(config_file.read_text())
    assert data == {
        "mcpServers": {
            "kirha-crypto": {
                "command": "npx",
                "args": ["-y", "@kirha/mcp-gateway", "stdio"],
                "env": {"KIRHA_API_KEY": api_key, "KIRHA_VERTICAL": "crypto"},
            }
        }
    }


def test_claude_running_probe_uses_exact_name(monkeypatch) -> None:
    calls = []

    def fake_probe(patterns, windows_images, ctx, exact=False):
        calls.append((patterns, windows_images, exact))
        return RunState.RUNNING

    monkeypatch.setattr("sys.platform", "darwin")
    monkeypatch.setattr("mcp_installer.platforms.claude.probe_process", fake_probe)

    assert ClaudeAdapter().is_client_running(OperationContext()) is RunState.RUNNING
    assert calls == [(["Claude"], ["Claude.exe"], True)]


def test_claude_running_check_linux_skips_claude_code(monkeypatch) -> None:
    """On Linux the desktop app is matched by its own executable, not the CLI's 'claude'."""
    calls = []

    def fake_probe(patterns, windows_images, ctx, exact=False):
        calls.append((patterns, exact))
        return RunState.NOT_RUNNING

    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setattr("mcp_installer.platforms.claude.probe_process", fake_probe)

    assert ClaudeAdapter().is_client_running(OperationContext()) is RunState.NOT_RUNNING
    assert calls == [([LINUX_DESKTOP_PATTERN], False)]
    assert re.search(LINUX_DESKTOP_PATTERN, "/opt/Claude/claude-desktop --no-sandbox")
    assert not re.search(LINUX_DESKTOP_PATTERN, "/home/dev/.local/bin/claude")
