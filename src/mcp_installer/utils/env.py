# Environment variable expansion for installer settings
import logging
import os
import re
from typing import Any

logger = logging.getLogger(__name__)

# ABOUTME: Matches ${VAR_NAME} and ${VAR_NAME:-fallback}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def expand_env_vars(value: str) -> str:
    """Expand ${VAR} and ${VAR:-default} references.

    ABOUTME: Unset variables without a default are left untouched and logged
    ABOUTME: A set-but-empty variable falls back to the default, like the shell

    Examples:
        >>> expand_env_vars("${HOME}/projects")
        '/Users/user/projects'
        >>> expand_env_vars("${KIRHA_MCP_URL:-https://mcp.kirha.com}")
        'https://mcp.kirha.com'
    """

    def replace_var(match: re.Match[str]) -> str:
        var_name, default = match.group(1), match.group(2)
        current = os.environ.get(var_name)
        if current:
            return current
        if default is not None:
            return default
        if current is not None:
            return current
        logger.warning(f"Environment variable '{var_name}' not set, keeping reference")
        return match.group(0)

    return ENV_VAR_PATTERN.sub(replace_var, value)


def expand_env_in(data: Any) -> Any:
    """Recursively expand env references in every string of a JSON-like value."""
    if isinstance(data, str):
        return expand_env_vars(data)
    if isinstance(data, dict):
        return {key: expand_env_in(value) for key, value in data.items()}
    if isinstance(data, list):
        return [expand_env_in(item) for item in data]
    return data
