# Platform adapter registry
from pathlib import Path
from typing import Callable

from mcp_installer.errors import ClientNotSupportedError
from mcp_installer.models import ClientType, InstallerAdapter, ServerSettings
from mcp_installer.platforms.base import BaseAdapter
from mcp_installer.platforms.claude import ClaudeAdapter
from mcp_installer.platforms.claudecode import ClaudeCodeAdapter
from mcp_installer.platforms.codex import CodexAdapter
from mcp_installer.platforms.cursor import CursorAdapter
from mcp_installer.platforms.docker import DockerAdapter
from mcp_installer.platforms.gemini import GeminiAdapter
from mcp_installer.platforms.opencode import OpenCodeAdapter
from mcp_installer.platforms.vscode import VSCodeAdapter

# Factory signature: (config_path, settings) -> adapter
AdapterFactory = Callable[..., InstallerAdapter]

# Registry of all available platform adapters
ALL_PLATFORMS: dict[ClientType, type[BaseAdapter]] = {
    ClientType.CLAUDE: ClaudeAdapter,
    ClientType.CLAUDE_CODE: ClaudeCodeAdapter,
    ClientType.CURSOR: CursorAdapter,
    ClientType.VSCODE: VSCodeAdapter,
    ClientType.CODEX: CodexAdapter,
    ClientType.GEMINI: GeminiAdapter,
    ClientType.OPENCODE: OpenCodeAdapter,
    ClientType.DOCKER: DockerAdapter,
}

__all__ = [
    "InstallerAdapter",
    "BaseAdapter",
    "ClaudeAdapter",
    "ClaudeCodeAdapter",
    "CursorAdapter",
    "VSCodeAdapter",
    "CodexAdapter",
    "GeminiAdapter",
    "OpenCodeAdapter",
    "DockerAdapter",
    "ALL_PLATFORMS",
    "AdapterRegistry",
    "default_registry",
]


class AdapterRegistry:
    """Maps client types to adapter factories.

    ABOUTME: The only place that knows every supported client
    ABOUTME: Factories receive config_path and settings as keyword arguments
    """

    def __init__(
        self,
        adapters: dict[ClientType, AdapterFactory] | None = None,
        settings: ServerSettings | None = None,
    ) -> None:
        self._adapters: dict[ClientType, AdapterFactory] = dict(
            ALL_PLATFORMS if adapters is None else adapters
        )
        self.settings = settings or ServerSettings()

    def register(self, client: ClientType, factory: AdapterFactory) -> None:
        self._adapters[client] = factory

    def clients(self) -> list[ClientType]:
        return list(self._adapters)

    def get(self, client: ClientType, config_path: Path | None = None) -> InstallerAdapter:
        """Build the adapter for a client.

        Raises:
            ClientNotSupportedError: If no adapter is registered for the client
        """
        factory = self._adapters.get(client)
        if factory is None:
            raise ClientNotSupportedError(f"client not supported: {client.value}")
        return factory(config_path=config_path, settings=self.settings)


def default_registry(settings: ServerSettings | None = None) -> AdapterRegistry:
    return AdapterRegistry(settings=settings)
