# Exception hierarchy for mcp-installer
# ABOUTME: Every error inherits from InstallerError (single catch point for the CLI)
# ABOUTME: Category bases mirror how the orchestrator branches on failures


class InstallerError(Exception):
    """Base exception for all mcp-installer errors.

    ABOUTME: Subclasses carry a default message so they can be raised bare
    """

    default_message = "mcp-installer error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


# Not found: often drives branch selection rather than aborting
class NotFoundError(InstallerError):
    default_message = "not found"


class ServerNotFoundError(NotFoundError):
    default_message = "MCP server not found in configuration"


class ServerNotFoundForUpdateError(ServerNotFoundError):
    default_message = "MCP server not found, use 'install' command to add it"


class ServerNotFoundForRemoveError(ServerNotFoundError):
    default_message = "MCP server not found, nothing to remove"


# Already exists: idempotency guard
class AlreadyExistsError(InstallerError):
    default_message = "already exists"


class ServerAlreadyExistsError(AlreadyExistsError):
    default_message = "MCP server already exists in configuration"


class ServerExistsUseUpdateError(ServerAlreadyExistsError):
    default_message = "MCP server already exists, use 'update' command to modify it"


class ConfigInvalidError(InstallerError):
    default_message = "invalid configuration format"


# File I/O
class FileAccessError(InstallerError):
    default_message = "file access failed"


class ConfigReadError(FileAccessError):
    default_message = "failed to read configuration"


class ConfigWriteError(FileAccessError):
    default_message = "failed to write configuration"


class ConfigPermissionError(FileAccessError):
    default_message = "permission denied"


class ConfigBackupError(FileAccessError):
    default_message = "failed to backup configuration"


class BackupExistsError(FileAccessError):
    default_message = "backup file already exists"


class ConfigRestoreError(FileAccessError):
    default_message = "failed to restore configuration"


# Host environment
class HostEnvironmentError(InstallerError):
    default_message = "unsupported environment"


class PlatformNotSupportedError(HostEnvironmentError):
    default_message = "platform not supported"


class ClientRunningError(HostEnvironmentError):
    default_message = "client is currently running, please close it before installing"


class ClientNotSupportedError(HostEnvironmentError):
    default_message = "client not supported"


# Caller input
class InputError(InstallerError):
    default_message = "invalid input"


class ApiKeyRequiredError(InputError):
    default_message = "API key is required"


class ApiKeyInvalidError(InputError):
    default_message = "invalid API key format"


class UnknownOperationError(InputError):
    default_message = "unknown operation"


# Post-write integrity
class IntegrityError(InstallerError):
    default_message = "configuration integrity check failed"


class InstallationFailedError(IntegrityError):
    default_message = "installation failed"


class OperationCancelledError(InstallerError):
    default_message = "operation cancelled"
