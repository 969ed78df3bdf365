# Gemini CLI platform adapter
from pathlib import Path
from typing import Any

from mcp_installer.models import ClientType, MCPServer
from mcp_installer.platforms.base import BaseAdapter, dict_to_server, server_to_dict
from mcp_installer.utils.process import program_pattern

# Request timeout written into new entries, in milliseconds
DEFAULT_TIMEOUT_MS = 30000


class GeminiAdapter(BaseAdapter):
    """Adapter for Gemini CLI (~/.gemini/settings.json).

    ABOUTME: Streamable HTTP servers use 'httpUrl' (plain 'url' means SSE)
    ABOUTME: Preserves non-MCP settings in the same file
    """

    client = ClientType.GEMINI
    display_name = "Gemini CLI"
    transport = "http"
    container_key = "mcpServers"
    process_patterns = [program_pattern("gemini")]
    windows_images = ["gemini.exe"]

    def default_config_path(self) -> Path:
        return Path.home() / ".gemini" / "settings.json"

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        entry = server_to_dict(server, url_key="httpUrl")
        if server.type == "http":
            entry["timeout"] = DEFAULT_TIMEOUT_MS
        return entry

    def entry_to_server(self, name: str, entry: dict[str, Any]) -> MCPServer:
        return dict_to_server(name, entry, url_keys=("httpUrl", "url"))
