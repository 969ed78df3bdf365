# Install/update/remove/show workflows over any InstallerAdapter
# ABOUTME: Every mutation runs backup -> validate -> write -> verify, with rollback
# ABOUTME: from the backup when the write or the verification fails
import logging
from pathlib import Path
from typing import Any

from mcp_installer.context import OperationContext
from mcp_installer.errors import (
    ClientRunningError,
    FileAccessError,
    InstallationFailedError,
    InstallerError,
    ServerExistsUseUpdateError,
    ServerNotFoundForRemoveError,
    ServerNotFoundForUpdateError,
    UnknownOperationError,
)
from mcp_installer.models import (
    NO_SERVERS_MESSAGE,
    ClientType,
    InstallerAdapter,
    InstallResult,
    MCPServer,
    Operation,
    Request,
    RunState,
    ServerIdentity,
    ServerSettings,
    ShowResult,
    extract_api_key,
    extract_plan_mode,
    new_kirha_server,
)
from mcp_installer.platforms import AdapterRegistry
from mcp_installer.utils.validation import validate_api_key, validate_server

logger = logging.getLogger(__name__)

ACTIVATE_HINT = "Please restart the application to activate the MCP server."
APPLY_HINT = "Please restart the application to apply changes."


class Orchestrator:
    """Runs one Request against the adapter for its client.

    ABOUTME: Talks to tools only through the InstallerAdapter protocol
    ABOUTME: Never inspects the raw config documents it passes around
    """

    def __init__(self, registry: AdapterRegistry, settings: ServerSettings | None = None) -> None:
        self.registry = registry
        self.settings = settings or registry.settings

    def execute(self, request: Request, ctx: OperationContext | None = None) -> InstallResult:
        """Dispatch a request to its workflow.

        Raises:
            UnknownOperationError: If the operation is not one of the four workflows
            InstallerError: Whatever the workflow raises
        """
        ctx = ctx or OperationContext()
        handlers = {
            Operation.INSTALL: self.install,
            Operation.UPDATE: self.update,
            Operation.REMOVE: self.remove,
            Operation.SHOW: self.show,
        }
        handler = handlers.get(request.operation)
        if handler is None:
            raise UnknownOperationError(f"unknown operation: {request.operation}")
        return handler(request, ctx)

    # Workflows

    def install(self, request: Request, ctx: OperationContext) -> InstallResult:
        logger.info(f"Starting install for {request.client.value}")
        validate_api_key(request.api_key)

        adapter = self.registry.get(request.client, request.config_path)
        config_path = adapter.get_config_path()
        identity = self.settings.identity(request.vertical)
        running = self._check_running(adapter, request, ctx)

        ctx.check()
        config = adapter.load_config(ctx)
        if adapter.has_mcp_server(config, identity):
            raise ServerExistsUseUpdateError(
                f"MCP server '{identity}' already exists in {adapter.name} configuration, "
                "use 'update' command to modify it"
            )

        server = new_kirha_server(
            request.api_key,
            request.vertical,
            self.settings,
            transport=adapter.transport,
            plan_mode=request.plan_mode,
        )
        self._warn_registration(adapter, server)

        if request.dry_run:
            return InstallResult(
                success=True,
                config_path=config_path,
                message=f"Would install {self._product} MCP server to {config_path}",
            )

        backup_path = self._backup(adapter, ctx)
        self._apply_add(adapter, ctx, config, server, identity, backup_path)

        logger.info(f"Install completed for {request.client.value}")
        return InstallResult(
            success=True,
            config_path=config_path,
            backup_path=backup_path,
            message=self._success(f"installed {self._product} MCP server for {request.client.value}",
                                  running, ACTIVATE_HINT),
        )

    def update(self, request: Request, ctx: OperationContext) -> InstallResult:
        logger.info(f"Starting update for {request.client.value}")
        # With --reuse-key the stored credential is checked once the config is loaded
        if request.api_key or not request.reuse_api_key:
            validate_api_key(request.api_key)

        adapter = self.registry.get(request.client, request.config_path)
        config_path = adapter.get_config_path()
        identity = self.settings.identity(request.vertical)
        running = self._check_running(adapter, request, ctx)

        ctx.check()
        config = adapter.load_config(ctx)
        if not adapter.has_mcp_server(config, identity):
            raise ServerNotFoundForUpdateError(
                f"MCP server '{identity}' not found in {adapter.name} configuration, "
                "use 'install' command to add it"
            )

        existing = adapter.get_mcp_server_config(config, identity)
        api_key = request.api_key
        if not api_key and request.reuse_api_key:
            api_key = extract_api_key(existing, self.settings) or ""
            logger.debug(f"Reusing API key stored in {identity}")
            validate_api_key(api_key)

        plan_mode = request.plan_mode
        if plan_mode is None:
            plan_mode = extract_plan_mode(existing, self.settings)

        server = new_kirha_server(
            api_key,
            request.vertical,
            self.settings,
            transport=adapter.transport,
            plan_mode=plan_mode,
        )
        self._warn_registration(adapter, server)

        if request.dry_run:
            return InstallResult(
                success=True,
                config_path=config_path,
                message=f"Would update {self._product} MCP server in {config_path}",
            )

        stripped = adapter.remove_mcp_server(config, identity)
        backup_path = self._backup(adapter, ctx)
        self._apply_add(adapter, ctx, stripped, server, identity, backup_path)

        logger.info(f"Update completed for {request.client.value}")
        return InstallResult(
            success=True,
            config_path=config_path,
            backup_path=backup_path,
            message=self._success(f"updated {self._product} MCP server for {request.client.value}",
                                  running, ACTIVATE_HINT),
        )

    def remove(self, request: Request, ctx: OperationContext) -> InstallResult:
        logger.info(f"Starting remove for {request.client.value}")
        adapter = self.registry.get(request.client, request.config_path)
        config_path = adapter.get_config_path()
        identity = self.settings.identity(request.vertical)
        running = self._check_running(adapter, request, ctx)

        ctx.check()
        config = adapter.load_config(ctx)
        if not adapter.has_mcp_server(config, identity):
            raise ServerNotFoundForRemoveError(
                f"MCP server '{identity}' not found in {adapter.name} configuration, nothing to remove"
            )

        if request.dry_run:
            return InstallResult(
                success=True,
                config_path=config_path,
                message=f"Would remove {self._product} MCP server from {config_path}",
            )

        backup_path = self._backup(adapter, ctx)
        adapter.validate_config(config)
        try:
            ctx.check()
            updated = adapter.remove_mcp_server(config, identity)
            adapter.save_config(ctx, updated)
        except Exception:
            self._rollback(adapter, ctx, backup_path)
            raise

        logger.info(f"Remove completed for {request.client.value}")
        return InstallResult(
            success=True,
            config_path=config_path,
            backup_path=backup_path,
            message=self._success(f"removed {self._product} MCP server from {request.client.value}",
                                  running, APPLY_HINT),
        )

    def show(self, request: Request, ctx: OperationContext) -> ShowResult:
        """Describe what is configured; never probes, backs up or writes."""
        adapter = self.registry.get(request.client, request.config_path)
        config_path = adapter.get_config_path()
        client = request.client.value

        if not config_path.exists():
            return ShowResult(
                success=True,
                config_path=config_path,
                has_server=False,
                message=f"Configuration file not found at {config_path}",
            )

        ctx.check()
        config = adapter.load_config(ctx)

        if request.vertical is not None:
            identities = [self.settings.identity(request.vertical)]
        else:
            identities = self.settings.known_identities()
        found = [identity for identity in identities if adapter.has_mcp_server(config, identity)]

        if found:
            server_config = adapter.get_mcp_server_config(config, found[0])
            if request.vertical is not None:
                full_config = adapter.format_specific_server(config, found[0])
            else:
                full_config = adapter.format_config(config)
            message = f"MCP configuration for {client}:\n\n{full_config}"
            return ShowResult(
                success=True,
                config_path=config_path,
                has_server=True,
                server_config=server_config,
                full_config=full_config,
                message=message,
            )

        full_config = adapter.format_config(config)
        if full_config == NO_SERVERS_MESSAGE:
            message = f"No MCP servers configured for {client}"
        else:
            message = (
                f"{self._product} MCP server not found for {client}, "
                f"but other servers are configured:\n\n{full_config}"
            )
        return ShowResult(
            success=True,
            config_path=config_path,
            has_server=False,
            full_config=full_config,
            message=message,
        )

    # Steps

    @property
    def _product(self) -> str:
        return self.settings.display_name

    def _check_running(self, adapter: InstallerAdapter, request: Request, ctx: OperationContext) -> bool:
        """Probe the client; block only when it is definitely running.

        Returns:
            True if the client was reported running and the operation goes ahead

        Raises:
            ClientRunningError: If running and neither dry_run nor force is set
        """
        try:
            state = adapter.is_client_running(ctx)
        except (InstallerError, OSError) as e:
            logger.warning(f"Could not check whether {adapter.name} is running: {e}")
            state = RunState.UNKNOWN

        if state is RunState.UNKNOWN:
            logger.warning(f"Could not determine whether {adapter.name} is running, continuing")
            return False
        if state is RunState.NOT_RUNNING:
            return False

        if request.dry_run or request.force:
            logger.warning(f"{adapter.name} is running, continuing anyway")
            return True
        raise ClientRunningError(
            f"{adapter.name} is currently running, please close it before continuing "
            "or use --force"
        )

    def _warn_registration(self, adapter: InstallerAdapter, server: MCPServer) -> None:
        # Docker runs the launcher inside the container, not on this host's PATH
        check_command = adapter.client is not ClientType.DOCKER
        for issue in validate_server(server, check_command=check_command):
            logger.warning(f"{issue.server_name}: {issue.message}")

    def _backup(self, adapter: InstallerAdapter, ctx: OperationContext) -> Path | None:
        try:
            return adapter.backup_config(ctx)
        except FileAccessError as e:
            logger.warning(f"Failed to create backup of {adapter.get_config_path()}: {e}")
            return None

    def _apply_add(
        self,
        adapter: InstallerAdapter,
        ctx: OperationContext,
        config: Any,
        server: MCPServer,
        identity: ServerIdentity,
        backup_path: Path | None,
    ) -> None:
        """Insert, write, then re-read and verify; roll back on any failure.

        Raises:
            InstallationFailedError: If the written file does not read back correctly
        """
        adapter.validate_config(config)
        try:
            ctx.check()
            updated = adapter.add_mcp_server(config, server)
            adapter.save_config(ctx, updated)
        except Exception:
            self._rollback(adapter, ctx, backup_path)
            raise

        try:
            reloaded = adapter.load_config(ctx)
            adapter.validate_config(reloaded)
        except InstallerError as e:
            self._rollback(adapter, ctx, backup_path)
            raise InstallationFailedError(f"installation verification failed: {e}") from e

        if not adapter.has_mcp_server(reloaded, identity):
            self._rollback(adapter, ctx, backup_path)
            raise InstallationFailedError(f"MCP server '{identity}' missing after write")

    def _rollback(self, adapter: InstallerAdapter, ctx: OperationContext, backup_path: Path | None) -> None:
        if backup_path is None:
            logger.warning(f"No backup to restore for {adapter.get_config_path()}")
            return
        try:
            adapter.restore_config(ctx, backup_path)
            logger.info(f"Rolled back {adapter.get_config_path()} from {backup_path}")
        except (InstallerError, OSError) as e:
            logger.error(f"Rollback from {backup_path} failed: {e}")

    @staticmethod
    def _success(summary: str, running: bool, hint: str) -> str:
        message = f"Successfully {summary}"
        if running:
            message += f". {hint}"
        return message
