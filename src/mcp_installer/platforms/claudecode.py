# Claude Code platform adapter
from pathlib import Path
from typing import Any

from mcp_installer.models import ClientType, MCPServer
from mcp_installer.platforms.base import BaseAdapter, server_to_dict
from mcp_installer.utils.process import program_pattern


class ClaudeCodeAdapter(BaseAdapter):
    """Adapter for Claude Code (~/.claude.json).

    ABOUTME: Entries carry an explicit "type": "stdio"
    ABOUTME: Other top-level keys (projects, history, ...) are preserved verbatim
    """

    client = ClientType.CLAUDE_CODE
    display_name = "Claude Code"
    transport = "stdio"
    container_key = "mcpServers"
    # The CLI runs as "claude" (native) or node .../@anthropic-ai/claude-code/cli.js
    process_patterns = [program_pattern("claude"), "claude-code/cli"]
    windows_images = ["claude.exe"]

    def default_config_path(self) -> Path:
        return Path.home() / ".claude.json"

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        return server_to_dict(server, include_type=True)
