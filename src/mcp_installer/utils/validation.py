# ABOUTME: Validation utilities for API keys and server registrations
# ABOUTME: API key problems raise; registration problems are reported as warnings
import re
import shutil
from dataclasses import dataclass
from urllib.parse import urlparse

from mcp_installer.errors import ApiKeyInvalidError, ApiKeyRequiredError
from mcp_installer.models import MCPServer

MIN_API_KEY_LENGTH = 8


@dataclass(frozen=True)
class ValidationError:
    """Represents a validation error or warning.

    ABOUTME: Uses frozen dataclass for immutability
    ABOUTME: Severity level distinguishes between blocking errors and warnings
    """
    server_name: str
    message: str
    severity: str  # 'error' or 'warning'


def validate_api_key(api_key: str) -> None:
    """Validate the API key format.

    ABOUTME: Non-empty, no whitespace, at least MIN_API_KEY_LENGTH characters

    Raises:
        ApiKeyRequiredError: If the key is empty
        ApiKeyInvalidError: If the key contains whitespace or is too short
    """
    if not api_key:
        raise ApiKeyRequiredError()
    if re.search(r"\s", api_key):
        raise ApiKeyInvalidError("invalid API key format: contains whitespace")
    if len(api_key) < MIN_API_KEY_LENGTH:
        raise ApiKeyInvalidError(
            f"invalid API key format: must be at least {MIN_API_KEY_LENGTH} characters"
        )


def validate_command_exists(command: str) -> ValidationError | None:
    """Validate that a command exists on the system.

    ABOUTME: Uses shutil.which() for cross-platform command lookup
    ABOUTME: Returns None if command found, ValidationError otherwise

    Examples:
        >>> validate_command_exists("nonexistent_cmd")
        ValidationError(server_name='', message='Command not found: nonexistent_cmd', severity='warning')
    """
    if shutil.which(command) is None:
        return ValidationError(
            server_name="",
            message=f"Command not found: {command}",
            severity="warning"
        )
    return None


def validate_url(url: str) -> ValidationError | None:
    """Validate that a URL is properly formatted.

    ABOUTME: Requires HTTP or HTTPS scheme and a host
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return ValidationError(
            server_name="",
            message=f"URL must use HTTP or HTTPS scheme: {url}",
            severity="warning"
        )
    if not parsed.netloc:
        return ValidationError(
            server_name="",
            message=f"URL missing host/domain: {url}",
            severity="warning"
        )
    return None


def validate_server(server: MCPServer, check_command: bool = True) -> list[ValidationError]:
    """Sanity-check a registration before it is written.

    ABOUTME: stdio: launcher should be on PATH
    ABOUTME: http: URL should be well formed
    ABOUTME: Never blocks an operation; callers log the results

    Args:
        server: Registration to check
        check_command: Skip the PATH lookup when the command runs elsewhere
            (e.g. inside a container)

    Returns:
        List of ValidationError instances (empty if nothing to report)
    """
    errors: list[ValidationError] = []

    if server.type == "stdio":
        if not server.command:
            errors.append(ValidationError(server.name, "stdio server has no command", "error"))
        elif check_command:
            cmd_error = validate_command_exists(server.command)
            if cmd_error:
                errors.append(ValidationError(server.name, cmd_error.message, cmd_error.severity))
    elif server.type == "http":
        if not server.url:
            errors.append(ValidationError(server.name, "http server has no url", "error"))
        else:
            url_error = validate_url(server.url)
            if url_error:
                errors.append(ValidationError(server.name, url_error.message, url_error.severity))

    return errors
