# Docker Compose platform adapter
import logging
import shlex
from pathlib import Path
from typing import Any

from mcp_installer.context import OperationContext
from mcp_installer.errors import ConfigInvalidError
from mcp_installer.models import ClientType, MCPServer, RunState, ServerSettings
from mcp_installer.platforms.base import BaseAdapter
from mcp_installer.utils.fileio import dump_yaml, parse_yaml, read_text
from mcp_installer.utils.process import run_probe

logger = logging.getLogger(__name__)

COMPOSE_FILE = "docker-compose.yml"
MCP_COMPOSE_FILE = "docker-compose.mcp.yml"
# Top-level extension key marking a compose file as written by this tool
MARKER_KEY = "x-mcp-installer"
SERVICE_SUFFIX = "-mcp"
NETWORK_NAME = "mcp"
IMAGE = "node:18-alpine"


class DockerAdapter(BaseAdapter):
    """Adapter for a Docker Compose manifest in the project directory.

    ABOUTME: Each server runs as service '<name>-mcp' on the 'mcp' bridge network
    ABOUTME: A user-owned docker-compose.yml is never modified; operations
    ABOUTME: then target docker-compose.mcp.yml next to it
    """

    client = ClientType.DOCKER
    display_name = "Docker"
    transport = "stdio"
    container_key = "services"

    def __init__(
        self,
        config_path: Path | None = None,
        settings: ServerSettings | None = None,
        project_dir: Path | None = None,
    ) -> None:
        super().__init__(config_path=config_path, settings=settings)
        self._project_dir = project_dir

    @property
    def project_dir(self) -> Path:
        return self._project_dir if self._project_dir is not None else Path.cwd()

    def get_config_path(self) -> Path:
        """Target file, chosen on first use and fixed for this adapter's lifetime.

        ABOUTME: A write that breaks the compose file must not redirect backup,
        ABOUTME: reload or restore to the sibling file
        """
        if self._config_path is None:
            self._config_path = self.default_config_path()
        return self._config_path

    def default_config_path(self) -> Path:
        compose = self.project_dir / COMPOSE_FILE
        if compose.exists() and not self._is_managed(compose):
            logger.debug(f"{compose} is user-owned, using {MCP_COMPOSE_FILE}")
            return self.project_dir / MCP_COMPOSE_FILE
        return compose

    def _is_managed(self, path: Path) -> bool:
        text = read_text(path)
        if text is None or not text.strip():
            return True
        try:
            data = parse_yaml(text, path)
        except ConfigInvalidError:
            # Unparseable user file: leave it alone
            return False
        return MARKER_KEY in data

    def parse(self, text: str, path: Path) -> dict[str, Any]:
        return parse_yaml(text, path)

    def dump(self, config: dict[str, Any]) -> str:
        return dump_yaml(config)

    def empty_config(self) -> dict[str, Any]:
        return {
            "version": "3.8",
            MARKER_KEY: {"managed": True},
            "services": {},
            "networks": {NETWORK_NAME: {"driver": "bridge"}},
        }

    def entry_key(self, server_name: str) -> str:
        return f"{server_name}{SERVICE_SUFFIX}"

    def server_name_for(self, key: str) -> str | None:
        if not key.endswith(SERVICE_SUFFIX):
            return None
        return key[: -len(SERVICE_SUFFIX)]

    def server_to_entry(self, server: MCPServer) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "image": IMAGE,
            "command": ["sh", "-c", shlex.join([server.command or "", *server.args])],
        }
        if server.env:
            entry["environment"] = dict(server.env)
        entry["restart"] = "unless-stopped"
        entry["networks"] = [NETWORK_NAME]
        return entry

    def entry_to_server(self, name: str, entry: dict[str, Any]) -> MCPServer:
        command = entry.get("command")
        if isinstance(command, list) and len(command) == 3 and command[:2] == ["sh", "-c"]:
            argv = shlex.split(str(command[2]))
        elif isinstance(command, list):
            argv = [str(part) for part in command]
        elif isinstance(command, str):
            argv = shlex.split(command)
        else:
            raise ConfigInvalidError(f"Service for '{name}' has no command")
        if not argv:
            raise ConfigInvalidError(f"Service for '{name}' has an empty command")

        return MCPServer(
            name=name,
            type="stdio",
            command=argv[0],
            args=argv[1:],
            env=_environment(entry.get("environment")),
        )

    def add_mcp_server(self, config: dict[str, Any], server: MCPServer) -> dict[str, Any]:
        updated = super().add_mcp_server(config, server)
        networks = updated.get("networks")
        if not isinstance(networks, dict):
            networks = {}
            updated["networks"] = networks
        networks.setdefault(NETWORK_NAME, {"driver": "bridge"})
        return updated

    def is_client_running(self, ctx: OperationContext) -> RunState:
        """Report RUNNING if a managed MCP container is up.

        ABOUTME: A missing or stopped Docker daemon means nothing can be running
        """
        info = run_probe(["docker", "info"], ctx)
        if info is None or info.returncode != 0:
            logger.info("Docker daemon not running or not installed")
            return RunState.NOT_RUNNING

        ps = run_probe(
            ["docker", "ps", "--filter", f"name={SERVICE_SUFFIX}", "--format", "{{.Names}}"],
            ctx,
        )
        if ps is None or ps.returncode != 0:
            return RunState.UNKNOWN

        names = [line for line in ps.stdout.splitlines() if self.settings.base_name in line]
        return RunState.RUNNING if names else RunState.NOT_RUNNING


def _environment(value: Any) -> dict[str, str]:
    # Compose accepts both a mapping and a list of KEY=VALUE strings
    if isinstance(value, dict):
        return {str(k): "" if v is None else str(v) for k, v in value.items()}
    if isinstance(value, list):
        env: dict[str, str] = {}
        for item in value:
            key, _, val = str(item).partition("=")
            env[key] = val
        return env
    return {}
