# Core data models for mcp-installer
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Protocol, runtime_checkable

from mcp_installer.context import OperationContext
from mcp_installer.errors import ClientNotSupportedError

Transport = Literal["stdio", "http"]

# Returned by format_config() when a config holds no MCP servers at all
NO_SERVERS_MESSAGE = "No MCP servers configured"


class ClientType(str, Enum):
    """Supported target tools.

    ABOUTME: Values are the canonical --client names
    """

    CLAUDE = "claude"
    CLAUDE_CODE = "claudecode"
    CURSOR = "cursor"
    VSCODE = "vscode"
    CODEX = "codex"
    GEMINI = "gemini"
    OPENCODE = "opencode"
    DOCKER = "docker"

    @classmethod
    def parse(cls, value: str) -> "ClientType":
        """Resolve a client name or alias (case insensitive).

        Raises:
            ClientNotSupportedError: If the name matches no client
        """
        normalized = value.strip().lower()
        normalized = _CLIENT_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise ClientNotSupportedError(f"unsupported client: {value}") from None


_CLIENT_ALIASES = {
    "claude-code": "claudecode",
    "claude_code": "claudecode",
    "claude-desktop": "claude",
    "vs-code": "vscode",
    "code": "vscode",
}


class Vertical(str, Enum):
    """Sub-product selector parameterising the registered server."""

    CRYPTO = "crypto"
    UTILS = "utils"


class Operation(str, Enum):
    INSTALL = "install"
    UPDATE = "update"
    REMOVE = "remove"
    SHOW = "show"


class RunState(Enum):
    """Result of a best-effort process probe.

    ABOUTME: UNKNOWN means detection failed; callers treat it as not running
    """

    RUNNING = "running"
    NOT_RUNNING = "not_running"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ServerIdentity:
    """Logical identity of the managed server inside one tool config."""

    base: str
    vertical: Vertical | None = None

    @property
    def name(self) -> str:
        if self.vertical is None:
            return self.base
        return f"{self.base}-{self.vertical.value}"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MCPServer:
    """Immutable MCP server registration.

    ABOUTME: Uses frozen dataclass to prevent accidental mutation
    ABOUTME: stdio servers use command/args/env, http servers use url/headers
    """

    name: str
    type: Transport
    command: str | None = None
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ServerSettings:
    """Identifiers and launch details for the managed server.

    ABOUTME: Passed explicitly to the registration factory and adapters
    ABOUTME: Loaded by mcp_installer.config.load_settings()
    """

    base_name: str = "kirha"
    display_name: str = "Kirha"
    url: str = "https://mcp.kirha.com"
    command: str = "npx"
    package: str = "@kirha/mcp-gateway"
    vertical_ids: dict[str, str] = field(
        default_factory=lambda: {"crypto": "crypto", "utils": "utils"}
    )
    api_key_env: str = "KIRHA_API_KEY"
    vertical_env: str = "KIRHA_VERTICAL"
    plan_mode_env: str = "KIRHA_PLAN_MODE"
    auth_header: str = "Authorization"
    vertical_header: str = "X-Kirha-Vertical"
    plan_mode_header: str = "X-Kirha-Plan-Mode"

    def identity(self, vertical: Vertical | None = None) -> ServerIdentity:
        return ServerIdentity(base=self.base_name, vertical=vertical)

    def known_identities(self) -> list[ServerIdentity]:
        """Bare base name first, then one identity per vertical."""
        return [self.identity(None)] + [self.identity(v) for v in Vertical]

    def is_own_entry(self, name: str) -> bool:
        return name == self.base_name or name.startswith(f"{self.base_name}-")

    def vertical_id(self, vertical: Vertical) -> str:
        return self.vertical_ids.get(vertical.value, vertical.value)

    @property
    def secret_keys(self) -> frozenset[str]:
        """Env and header names whose values must be masked for display."""
        return frozenset({self.api_key_env, self.auth_header})


def new_kirha_server(
    api_key: str,
    vertical: Vertical | None,
    settings: ServerSettings,
    transport: Transport = "stdio",
    plan_mode: bool | None = None,
) -> MCPServer:
    """Build the registration written into a tool's config.

    ABOUTME: stdio launches the gateway package locally with the key in env
    ABOUTME: http points at the hosted endpoint with a bearer header

    Args:
        api_key: Credential embedded in env or Authorization header
        vertical: Vertical selector, or None for the bare server name
        settings: Server identifiers and launch details
        transport: Registration flavour accepted by the target tool
        plan_mode: Explicit plan-mode flag, omitted when None

    Returns:
        MCPServer registration named after the server identity
    """
    name = settings.identity(vertical).name

    if transport == "http":
        headers = {settings.auth_header: f"Bearer {api_key}"}
        if vertical is not None:
            headers[settings.vertical_header] = settings.vertical_id(vertical)
        if plan_mode is not None:
            headers[settings.plan_mode_header] = _flag(plan_mode)
        return MCPServer(name=name, type="http", url=settings.url, headers=headers)

    env = {settings.api_key_env: api_key}
    if vertical is not None:
        env[settings.vertical_env] = settings.vertical_id(vertical)
    if plan_mode is not None:
        env[settings.plan_mode_env] = _flag(plan_mode)
    return MCPServer(
        name=name,
        type="stdio",
        command=settings.command,
        args=["-y", settings.package, "stdio"],
        env=env,
    )


def extract_api_key(server: MCPServer, settings: ServerSettings) -> str | None:
    """Return the credential stored in an existing registration, if any."""
    if server.type == "http":
        value = server.headers.get(settings.auth_header, "")
        if value.startswith("Bearer "):
            return value[len("Bearer "):].strip() or None
        return value.strip() or None
    return server.env.get(settings.api_key_env) or None


def extract_plan_mode(server: MCPServer, settings: ServerSettings) -> bool | None:
    """Return the plan-mode flag stored in an existing registration, if set."""
    if server.type == "http":
        raw = server.headers.get(settings.plan_mode_header)
    else:
        raw = server.env.get(settings.plan_mode_env)
    if raw is None:
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class Request:
    """One CLI invocation, as handed to Orchestrator.execute()."""

    client: ClientType
    operation: Operation
    vertical: Vertical | None = None
    api_key: str = ""
    dry_run: bool = False
    verbose: bool = False
    force: bool = False
    config_path: Path | None = None
    plan_mode: bool | None = None
    reuse_api_key: bool = False


@dataclass
class InstallResult:
    success: bool
    config_path: Path | None = None
    backup_path: Path | None = None
    message: str = ""


@dataclass
class ShowResult(InstallResult):
    has_server: bool = False
    server_config: MCPServer | None = None
    full_config: str = ""


@runtime_checkable
class InstallerAdapter(Protocol):
    """Protocol for per-tool config adapters.

    ABOUTME: The orchestrator talks to tools only through this interface
    ABOUTME: RawConfig values are opaque to callers and passed back unchanged
    """

    client: ClientType
    transport: Transport

    @property
    def name(self) -> str:
        """Human-readable tool name."""
        ...

    def get_config_path(self) -> Path:
        ...

    def load_config(self, ctx: OperationContext) -> Any:
        ...

    def has_mcp_server(self, config: Any, identity: ServerIdentity) -> bool:
        ...

    def get_mcp_server_config(self, config: Any, identity: ServerIdentity) -> MCPServer:
        ...

    def add_mcp_server(self, config: Any, server: MCPServer) -> Any:
        ...

    def remove_mcp_server(self, config: Any, identity: ServerIdentity) -> Any:
        ...

    def save_config(self, ctx: OperationContext, config: Any) -> None:
        ...

    def validate_config(self, config: Any) -> None:
        ...

    def backup_config(self, ctx: OperationContext) -> Path | None:
        ...

    def restore_config(self, ctx: OperationContext, backup_path: Path | None) -> None:
        ...

    def is_client_running(self, ctx: OperationContext) -> RunState:
        ...

    def format_config(self, config: Any, only_own: bool = False) -> str:
        ...

    def format_specific_server(self, config: Any, identity: ServerIdentity) -> str:
        ...
