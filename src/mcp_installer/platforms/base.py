# Platform adapter base utilities
# ABOUTME: BaseAdapter implements the InstallerAdapter protocol for tools that keep
# ABOUTME: MCP servers in one mapping ("container") inside a single config document
import copy
import logging
import os
import sys
from pathlib import Path
from typing import Any

from mcp_installer.context import OperationContext
from mcp_installer.errors import (
    ConfigInvalidError,
    PlatformNotSupportedError,
    ServerAlreadyExistsError,
    ServerNotFoundError,
)
from mcp_installer.models import (
    NO_SERVERS_MESSAGE,
    ClientType,
    MCPServer,
    RunState,
    ServerIdentity,
    ServerSettings,
    Transport,
)
from mcp_installer.utils.backup import create_backup, restore_backup
from mcp_installer.utils.fileio import (
    atomic_write_text,
    dump_json,
    parse_json,
    read_text,
)
from mcp_installer.utils.masking import mask_secret
from mcp_installer.utils.process import probe_process

logger = logging.getLogger(__name__)


def app_config_dir(platform: str | None = None) -> Path:
    """Per-user application config directory for desktop apps.

    ABOUTME: macOS: ~/Library/Application Support
    ABOUTME: Windows: %APPDATA% (falls back to ~/AppData/Roaming)
    ABOUTME: Linux: $XDG_CONFIG_HOME (falls back to ~/.config)

    Raises:
        PlatformNotSupportedError: On any other OS
    """
    platform = platform or sys.platform
    home = Path.home()

    if platform == "darwin":
        return home / "Library" / "Application Support"
    if platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if platform.startswith("linux"):
        return xdg_config_home()
    raise PlatformNotSupportedError(f"platform not supported: {platform}")


def xdg_config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


def server_to_dict(
    server: MCPServer,
    include_type: bool = False,
    url_key: str = "url",
    headers_key: str = "headers",
) -> dict[str, Any]:
    """Convert MCPServer to platform dict format.

    ABOUTME: Omits empty env/headers dicts for cleaner output
    ABOUTME: Handles both stdio and HTTP server types
    """
    result: dict[str, Any] = {}
    if include_type:
        result["type"] = server.type

    if server.type == "stdio":
        result["command"] = server.command
        result["args"] = list(server.args)
        if server.env:
            result["env"] = dict(server.env)
    elif server.type == "http":
        if server.url:
            result[url_key] = server.url
        if server.headers:
            result[headers_key] = dict(server.headers)

    return result


def dict_to_server(
    name: str,
    data: dict[str, Any],
    url_keys: tuple[str, ...] = ("url",),
    headers_key: str = "headers",
) -> MCPServer:
    """Convert platform dict format to MCPServer.

    ABOUTME: Infers the transport from the keys present when "type" is absent
    ABOUTME: Handles missing env/args/headers fields gracefully

    Raises:
        ConfigInvalidError: If the entry is neither a stdio nor an http server
    """
    if "command" in data:
        command = data["command"]
        args = data.get("args") or []
        if not isinstance(command, str) or not isinstance(args, list):
            raise ConfigInvalidError(f"Server '{name}' has malformed command/args")
        return MCPServer(
            name=name,
            type="stdio",
            command=command,
            args=[str(arg) for arg in args],
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
        )

    for key in url_keys:
        if isinstance(data.get(key), str):
            return MCPServer(
                name=name,
                type="http",
                url=data[key],
                headers={str(k): str(v) for k, v in (data.get(headers_key) or {}).items()},
            )

    raise ConfigInvalidError(f"Server '{name}' has neither 'command' nor a URL")


class BaseAdapter:
    """Shared implementation of the InstallerAdapter protocol.

    ABOUTME: Subclasses set client/display_name/container_key and
    ABOUTME: default_config_path(); file formats override parse()/dump()
    ABOUTME: Entry shapes override server_to_entry()/entry_to_server()
    """

    client: ClientType
    display_name: str = ""
    transport: Transport = "stdio"
    container_key: str = "mcpServers"
    # Drop the container key once its last entry is removed
    drop_empty_container: bool = False
    process_patterns: list[str] = []
    windows_images: list[str] = []

    def __init__(self, config_path: Path | None = None, settings: ServerSettings | None = None) -> None:
        """Initialize adapter with optional custom config path.

        ABOUTME: Defaults to the tool's standard location if not provided
        """
        self._config_path = config_path
        self.settings = settings or ServerSettings()

    @property
    def name(self) -> str:
        """Human-readable platform name."""
        return self.display_name

    def default_config_path(self) -> Path:
        raise NotImplementedError

    def get_config_path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return self.default_config_path()

    # Serialisation hooks (JSON by default)

    def parse(self, text: str, path: Path) -> dict[str, Any]:
        return parse_json(text, path)

    def dump(self, config: dict[str, Any]) -> str:
        return dump_json(config)

    def empty_config(self) -> dict[str, Any]:
        return {}

    # Entry shape hooks

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        return server_to_dict(server)

    def entry_to_server(self, name: str, entry: dict[str, Any]) -> MCPServer:
        return dict_to_server(name, entry)

    def entry_key(self, server_name: str) -> str:
        """Key under which a server is stored in the container."""
        return server_name

    def server_name_for(self, key: str) -> str | None:
        """Inverse of entry_key(); None for keys that are not MCP servers."""
        return key

    # Container access

    def _servers(self, config: dict[str, Any]) -> dict[str, Any]:
        servers = config.get(self.container_key)
        return servers if isinstance(servers, dict) else {}

    def _ensure_container(self, config: dict[str, Any]) -> dict[str, Any]:
        servers = config.get(self.container_key)
        if not isinstance(servers, dict):
            servers = {}
            config[self.container_key] = servers
        return servers

    def _entries(self, config: dict[str, Any]) -> dict[str, dict[str, Any]]:
        """MCP server entries keyed by server name."""
        result: dict[str, dict[str, Any]] = {}
        for key, entry in self._servers(config).items():
            name = self.server_name_for(key)
            if name is not None:
                result[name] = entry
        return result

    # InstallerAdapter protocol

    def load_config(self, ctx: OperationContext) -> dict[str, Any]:
        """Load the whole config document.

        ABOUTME: Missing or blank file yields a fresh empty config
        """
        ctx.check()
        path = self.get_config_path()
        text = read_text(path)
        if text is None or not text.strip():
            logger.debug(f"No {self.name} config at {path}, starting empty")
            return self.empty_config()

        config = self.parse(text, path)
        self.validate_config(config)
        logger.debug(f"Loaded {self.name} config from {path}")
        return config

    def has_mcp_server(self, config: dict[str, Any], identity: ServerIdentity) -> bool:
        return self.entry_key(identity.name) in self._servers(config)

    def get_mcp_server_config(self, config: dict[str, Any], identity: ServerIdentity) -> MCPServer:
        key = self.entry_key(identity.name)
        servers = self._servers(config)
        if key not in servers:
            raise ServerNotFoundError(f"MCP server '{identity}' not found in {self.name} configuration")
        return self.entry_to_server(identity.name, servers[key])

    def add_mcp_server(self, config: dict[str, Any], server: MCPServer) -> dict[str, Any]:
        """Return a copy of config with the server inserted.

        Raises:
            ServerAlreadyExistsError: If an entry with the same name exists
        """
        key = self.entry_key(server.name)
        if key in self._servers(config):
            raise ServerAlreadyExistsError(
                f"MCP server '{server.name}' already exists in {self.name} configuration"
            )

        updated = copy.deepcopy(config)
        self._ensure_container(updated)[key] = self.server_to_entry(server)
        logger.info(f"Added MCP server {server.name} to {self.name} configuration")
        return updated

    def remove_mcp_server(self, config: dict[str, Any], identity: ServerIdentity) -> dict[str, Any]:
        """Return a copy of config with exactly one entry removed.

        Raises:
            ServerNotFoundError: If the entry is absent
        """
        key = self.entry_key(identity.name)
        if key not in self._servers(config):
            raise ServerNotFoundError(f"MCP server '{identity}' not found in {self.name} configuration")

        updated = copy.deepcopy(config)
        servers = updated[self.container_key]
        del servers[key]
        if not servers and self.drop_empty_container:
            del updated[self.container_key]
        logger.info(f"Removed MCP server {identity} from {self.name} configuration")
        return updated

    def save_config(self, ctx: OperationContext, config: dict[str, Any]) -> None:
        ctx.check()
        path = self.get_config_path()
        atomic_write_text(path, self.dump(config))
        logger.info(f"Saved {self.name} configuration to {path}")

    def validate_config(self, config: Any) -> None:
        """Structural check of a loaded or about-to-be-written document.

        Raises:
            ConfigInvalidError: If the document or server container is malformed
        """
        if not isinstance(config, dict):
            raise ConfigInvalidError(f"{self.name} configuration must be a mapping")

        servers = config.get(self.container_key)
        if servers is None:
            return
        if not isinstance(servers, dict):
            raise ConfigInvalidError(f"'{self.container_key}' in {self.name} configuration must be a mapping")
        for key, entry in servers.items():
            if not isinstance(entry, dict):
                raise ConfigInvalidError(f"entry '{key}' in {self.name} configuration must be a mapping")

    def backup_config(self, ctx: OperationContext) -> Path | None:
        ctx.check()
        return create_backup(self.get_config_path())

    def restore_config(self, ctx: OperationContext, backup_path: Path | None) -> None:
        if backup_path is None:
            return
        restore_backup(backup_path, self.get_config_path())

    def is_client_running(self, ctx: OperationContext) -> RunState:
        return probe_process(self.process_patterns, self.windows_images, ctx)

    # Human-readable listings

    def format_config(self, config: dict[str, Any], only_own: bool = False) -> str:
        """List configured servers, Kirha entries first, secrets masked."""
        entries = self._entries(config)
        own = {n: e for n, e in entries.items() if self.settings.is_own_entry(n)}
        other = {n: e for n, e in entries.items() if not self.settings.is_own_entry(n)}

        if only_own:
            if not own:
                return f"No {self.settings.display_name} MCP servers configured"
            return self._format_section(f"{self.settings.display_name} MCP Servers", own)

        if not entries:
            return NO_SERVERS_MESSAGE

        sections = []
        if own:
            sections.append(self._format_section(f"{self.settings.display_name} MCP Servers", own))
        if other:
            sections.append(self._format_section("Other MCP Servers", other))
        return "\n".join(sections)

    def format_specific_server(self, config: dict[str, Any], identity: ServerIdentity) -> str:
        """Format a single managed server.

        Raises:
            ServerNotFoundError: If the entry is absent
        """
        key = self.entry_key(identity.name)
        servers = self._servers(config)
        if key not in servers:
            raise ServerNotFoundError(f"MCP server '{identity}' not found in {self.name} configuration")

        title = f"{self.settings.display_name} MCP Server"
        if identity.vertical is not None:
            title += f" ({identity.vertical.value})"
        return self._format_section(title, {identity.name: servers[key]})

    def _format_section(self, title: str, entries: dict[str, dict[str, Any]]) -> str:
        lines = [f"=== {title} ===", ""]
        for name in sorted(entries):
            lines.extend(self._format_entry(name, entries[name]))
            lines.append("")
        return "\n".join(lines)

    def _format_entry(self, name: str, entry: dict[str, Any]) -> list[str]:
        lines = [f"Server: {name}"]
        try:
            server = self.entry_to_server(name, entry)
        except ConfigInvalidError:
            lines.append("  (unrecognized entry)")
            return lines

        secret_keys = self.settings.secret_keys
        lines.append(f"  Type: {server.type}")
        if server.type == "stdio":
            lines.append(f"  Command: {server.command}")
            lines.append(f"  Args: {' '.join(server.args)}")
            if server.env:
                lines.append("  Environment:")
                for key, value in server.env.items():
                    shown = mask_secret(value) if key in secret_keys else value
                    lines.append(f"    {key}: {shown}")
        else:
            lines.append(f"  URL: {server.url}")
            if server.headers:
                lines.append("  Headers:")
                for key, value in server.headers.items():
                    shown = mask_secret(value) if key in secret_keys else value
                    lines.append(f"    {key}: {shown}")
        return lines
