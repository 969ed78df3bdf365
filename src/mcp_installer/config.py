# Settings loading for mcp-installer
import json
import logging
import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

from mcp_installer.errors import ConfigInvalidError
from mcp_installer.models import ServerSettings, Vertical
from mcp_installer.utils.env import expand_env_in

logger = logging.getLogger(__name__)

# ABOUTME: Default settings directory in user's home
CONFIG_DIR = Path.home() / ".mcp-installer"

# ABOUTME: Optional settings file location (JSON format)
CONFIG_FILE = CONFIG_DIR / "config.json"

# ABOUTME: Env var pointing at an alternative settings file
CONFIG_ENV = "MCP_INSTALLER_CONFIG"

# ABOUTME: Env vars overriding individual settings after the file is applied
ENV_OVERRIDES = {
    "KIRHA_MCP_URL": "url",
    "KIRHA_MCP_PACKAGE": "package",
}


def get_settings_path() -> Path:
    """Return the path to the settings file.

    ABOUTME: $MCP_INSTALLER_CONFIG if set, else ~/.mcp-installer/config.json
    ABOUTME: File may not exist; defaults apply in that case
    """
    override = os.environ.get(CONFIG_ENV)
    return Path(override).expanduser() if override else CONFIG_FILE


def load_settings(path: Path | None = None) -> ServerSettings:
    """Build ServerSettings from defaults, the settings file and env overrides.

    ABOUTME: Uses built-in json module for JSON parsing
    ABOUTME: Expands ${VAR} and ${VAR:-default} in all string values
    ABOUTME: Fail-fast on unknown keys or wrong value types

    Args:
        path: Settings file to read (defaults to get_settings_path())

    Returns:
        Resolved ServerSettings

    Raises:
        ConfigInvalidError: If the file is malformed or holds invalid values
    """
    path = path or get_settings_path()
    settings = ServerSettings()

    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigInvalidError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise ConfigInvalidError(f"Cannot read settings file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigInvalidError(f"Settings file {path} must contain a JSON object")
        settings = replace(settings, **_validate(expand_env_in(data), path))
        logger.debug(f"Loaded settings from {path}")

    overrides = {
        attr: os.environ[env_var]
        for env_var, attr in ENV_OVERRIDES.items()
        if os.environ.get(env_var)
    }
    if overrides:
        settings = replace(settings, **overrides)

    return settings


def _validate(data: dict[str, Any], path: Path) -> dict[str, Any]:
    known = {f.name for f in fields(ServerSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigInvalidError(f"Unknown setting(s) in {path}: {', '.join(unknown)}")

    for key, value in data.items():
        if key == "vertical_ids":
            if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
                raise ConfigInvalidError(f"'vertical_ids' in {path} must map vertical names to strings")
            valid = {v.value for v in Vertical}
            bad = sorted(set(value) - valid)
            if bad:
                raise ConfigInvalidError(f"Unknown vertical(s) in {path}: {', '.join(bad)}")
        elif not isinstance(value, str) or not value:
            raise ConfigInvalidError(f"Setting '{key}' in {path} must be a non-empty string")

    if "vertical_ids" in data:
        merged = dict(ServerSettings().vertical_ids)
        merged.update(data["vertical_ids"])
        data = {**data, "vertical_ids": merged}
    return data
