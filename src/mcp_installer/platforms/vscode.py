# VS Code platform adapter
import sys
from pathlib import Path
from typing import Any

from mcp_installer.context import OperationContext
from mcp_installer.models import ClientType, MCPServer, RunState
from mcp_installer.platforms.base import BaseAdapter, app_config_dir, server_to_dict
from mcp_installer.utils.fileio import parse_json
from mcp_installer.utils.process import probe_process


class VSCodeAdapter(BaseAdapter):
    """Adapter for VS Code user settings (User/settings.json).

    ABOUTME: Servers live under the flat dotted key "mcp.servers"
    ABOUTME: settings.json is JSONC; comments are tolerated on read and
    ABOUTME: dropped when the file is written back
    """

    client = ClientType.VSCODE
    display_name = "VS Code"
    transport = "stdio"
    container_key = "mcp.servers"
    drop_empty_container = True

    def default_config_path(self) -> Path:
        return app_config_dir() / "Code" / "User" / "settings.json"

    def parse(self, text: str, path: Path) -> dict[str, Any]:
        return parse_json(text, path, allow_comments=True)

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        return server_to_dict(server, include_type=True)

    def is_client_running(self, ctx: OperationContext) -> RunState:
        if sys.platform.startswith("linux"):
            return probe_process(["code"], [], ctx, exact=True)
        return probe_process(["Visual Studio Code|Code Helper"], ["Code.exe"], ctx)
