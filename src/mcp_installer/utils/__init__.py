# ABOUTME: Utility modules for mcp-installer
# ABOUTME: Exports env expansion, backup, masking, and validation functions

from mcp_installer.utils.backup import create_backup, restore_backup
from mcp_installer.utils.env import expand_env_vars
from mcp_installer.utils.masking import mask_api_key, mask_secret
from mcp_installer.utils.validation import (
    ValidationError,
    validate_api_key,
    validate_command_exists,
    validate_server,
)

__all__ = [
    "expand_env_vars",
    "ValidationError",
    "validate_api_key",
    "validate_command_exists",
    "validate_server",
    "create_backup",
    "restore_backup",
    "mask_api_key",
    "mask_secret",
]
