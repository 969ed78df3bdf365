# mcp-installer - Kirha MCP server installer for developer tools
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and the orchestrator entry point
from mcp_installer.config import get_settings_path, load_settings
from mcp_installer.context import OperationContext
from mcp_installer.models import (
    ClientType,
    InstallerAdapter,
    InstallResult,
    MCPServer,
    Operation,
    Request,
    ServerSettings,
    ShowResult,
    Vertical,
    new_kirha_server,
)
from mcp_installer.orchestrator import Orchestrator
from mcp_installer.platforms import AdapterRegistry, default_registry

__all__ = [
    "__version__",
    "ClientType",
    "InstallerAdapter",
    "InstallResult",
    "MCPServer",
    "Operation",
    "OperationContext",
    "Orchestrator",
    "Request",
    "ServerSettings",
    "ShowResult",
    "Vertical",
    "AdapterRegistry",
    "default_registry",
    "get_settings_path",
    "load_settings",
    "new_kirha_server",
]
