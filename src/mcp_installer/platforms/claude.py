# Claude Desktop platform adapter
import sys
from pathlib import Path

from mcp_installer.context import OperationContext
from mcp_installer.models import ClientType, RunState
from mcp_installer.platforms.base import BaseAdapter, app_config_dir
from mcp_installer.utils.process import probe_process, program_pattern

# Linux builds of the desktop app ship as "claude-desktop"; plain "claude" is Claude Code
LINUX_DESKTOP_PATTERN = program_pattern("claude-desktop")


class ClaudeAdapter(BaseAdapter):
    """Adapter for Claude Desktop (claude_desktop_config.json).

    ABOUTME: Config lives in the OS application-support directory
    ABOUTME: Servers are stdio entries under 'mcpServers' (command/args/env)
    """

    client = ClientType.CLAUDE
    display_name = "Claude Desktop"
    transport = "stdio"
    container_key = "mcpServers"

    def default_config_path(self) -> Path:
        return app_config_dir() / "Claude" / "claude_desktop_config.json"

    def is_client_running(self, ctx: OperationContext) -> RunState:
        if sys.platform == "darwin":
            # The app process is "Claude"; the Claude Code CLI is lowercase "claude"
            return probe_process(["Claude"], ["Claude.exe"], ctx, exact=True)
        return probe_process([LINUX_DESKTOP_PATTERN], ["Claude.exe"], ctx)
