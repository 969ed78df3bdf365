# Cursor platform adapter
from pathlib import Path

from mcp_installer.models import ClientType
from mcp_installer.platforms.base import BaseAdapter


class CursorAdapter(BaseAdapter):
    """Adapter for Cursor (~/.cursor/mcp.json)."""

    client = ClientType.CURSOR
    display_name = "Cursor"
    transport = "stdio"
    container_key = "mcpServers"
    process_patterns = ["Cursor"]
    windows_images = ["Cursor.exe"]

    def default_config_path(self) -> Path:
        return Path.home() / ".cursor" / "mcp.json"
