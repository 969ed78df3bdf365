# Tests for shared platform adapter helpers
from pathlib import Path

import pytest

from mcp_installer.errors import ConfigInvalidError, PlatformNotSupportedError
from mcp_installer.models import MCPServer
from mcp_installer.platforms.base import app_config_dir, dict_to_server, server_to_dict


def test_server_to_dict_stdio_omits_empty_env():
    server = MCPServer(name="fs", type="stdio", command="npx", args=["-y", "fs"])
    assert server_to_dict(server) == {"command": "npx", "args": ["-y", "fs"]}


def test_server_to_dict_with_type_and_keys():
    server = MCPServer(name="kirha", type="http", url="https://mcp.kirha.com",
                       headers={"Authorization": "Bearer x"})
    assert server_to_dict(server, include_type=True, url_key="httpUrl") == {
        "type": "http",
        "httpUrl": "https://mcp.kirha.com",
        "headers": {"Authorization": "Bearer x"},
    }


def test_dict_to_server_infers_transport():
    assert dict_to_server("fs", {"command": "npx"}).type == "stdio"
    assert dict_to_server("docs", {"url": "https://x"}).type == "http"


def test_dict_to_server_rejects_unknown_shape():
    with pytest.raises(ConfigInvalidError, match="neither"):
        dict_to_server("odd", {"disabled": True})


def test_dict_to_server_rejects_malformed_args():
    with pytest.raises(ConfigInvalidError):
        dict_to_server("odd", {"command": "npx", "args": "-y fs"})


def test_app_config_dir_linux_fallback(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert app_config_dir("linux") == tmp_path / ".config"


def test_app_config_dir_windows_fallback(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert app_config_dir("win32") == tmp_path / "AppData" / "Roaming"


def test_app_config_dir_unsupported():
    with pytest.raises(PlatformNotSupportedError):
        app_config_dir("aix")
