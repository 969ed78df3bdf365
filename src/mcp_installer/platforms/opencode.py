# OpenCode platform adapter
from pathlib import Path
from typing import Any

from mcp_installer.errors import ConfigInvalidError
from mcp_installer.models import ClientType, MCPServer
from mcp_installer.platforms.base import BaseAdapter, dict_to_server, xdg_config_home
from mcp_installer.utils.process import program_pattern


class OpenCodeAdapter(BaseAdapter):
    """Adapter for OpenCode ($XDG_CONFIG_HOME/opencode/opencode.json).

    ABOUTME: Servers live under 'mcp'; HTTP servers are "type": "remote"
    ABOUTME: Local servers store the whole command line as a list
    """

    client = ClientType.OPENCODE
    display_name = "OpenCode"
    transport = "http"
    container_key = "mcp"
    process_patterns = [program_pattern("opencode")]
    windows_images = ["opencode.exe"]

    def default_config_path(self) -> Path:
        return xdg_config_home() / "opencode" / "opencode.json"

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        if server.type == "stdio":
            entry: dict[str, Any] = {
                "type": "local",
                "command": [server.command, *server.args],
                "enabled": True,
            }
            if server.env:
                entry["environment"] = dict(server.env)
            return entry

        entry = {"type": "remote", "url": server.url, "enabled": True}
        if server.headers:
            entry["headers"] = dict(server.headers)
        return entry

    def entry_to_server(self, name: str, entry: dict[str, Any]) -> MCPServer:
        command = entry.get("command")
        if isinstance(command, list):
            if not command:
                raise ConfigInvalidError(f"Server '{name}' has an empty command")
            return MCPServer(
                name=name,
                type="stdio",
                command=str(command[0]),
                args=[str(arg) for arg in command[1:]],
                env={str(k): str(v) for k, v in (entry.get("environment") or {}).items()},
            )
        return dict_to_server(name, entry)
