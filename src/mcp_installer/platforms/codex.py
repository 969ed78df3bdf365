# Codex CLI platform adapter
import os
from pathlib import Path
from typing import Any

from mcp_installer.models import ClientType, MCPServer
from mcp_installer.platforms.base import BaseAdapter, dict_to_server, server_to_dict
from mcp_installer.utils.process import program_pattern
from mcp_installer.utils.fileio import dump_toml, parse_toml


class CodexAdapter(BaseAdapter):
    """Adapter for Codex CLI ($CODEX_HOME/config.toml).

    ABOUTME: Uses snake_case mcp_servers table (not mcpServers)
    ABOUTME: Registers the hosted endpoint: url + http_headers
    """

    client = ClientType.CODEX
    display_name = "Codex CLI"
    transport = "http"
    container_key = "mcp_servers"
    process_patterns = [program_pattern("codex")]
    windows_images = ["codex.exe"]

    def default_config_path(self) -> Path:
        codex_home = os.environ.get("CODEX_HOME")
        base = Path(codex_home) if codex_home else Path.home() / ".codex"
        return base / "config.toml"

    def parse(self, text: str, path: Path) -> dict[str, Any]:
        return parse_toml(text, path)

    def dump(self, config: dict[str, Any]) -> str:
        return dump_toml(config)

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        return server_to_dict(server, headers_key="http_headers")

    def entry_to_server(self, name: str, entry: dict[str, Any]) -> MCPServer:
        return dict_to_server(name, entry, headers_key="http_headers")
