# File reading, parsing and atomic writing for tool config files
# ABOUTME: Maps OS and parser errors onto the installer error taxonomy
# ABOUTME: All writes go through a temp file in the target directory + os.replace
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

import tomli
import tomli_w
import yaml

from mcp_installer.errors import (
    ConfigInvalidError,
    ConfigPermissionError,
    ConfigReadError,
    ConfigWriteError,
)

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str | None:
    """Read a UTF-8 file.

    ABOUTME: Returns None if the file does not exist (first run is normal)

    Raises:
        ConfigPermissionError: If the file cannot be accessed
        ConfigReadError: On any other I/O or decoding failure
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except PermissionError as e:
        raise ConfigPermissionError(f"permission denied reading {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"failed to read {path}: {e}") from e


def strip_jsonc_comments(text: str) -> str:
    """Strip // and /* */ comments from JSONC.

    ABOUTME: Tracks string state so URLs like "https://..." survive
    """
    result: list[str] = []
    i = 0
    length = len(text)
    in_string = False
    escape = False

    while i < length:
        ch = text[i]

        if in_string:
            result.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            result.append(ch)
            i += 1
            continue

        if ch == "/" and i + 1 < length and text[i + 1] == "/":
            i += 2
            while i < length and text[i] != "\n":
                i += 1
            continue

        if ch == "/" and i + 1 < length and text[i + 1] == "*":
            i += 2
            while i + 1 < length and not (text[i] == "*" and text[i + 1] == "/"):
                i += 1
            i += 2
            continue

        result.append(ch)
        i += 1

    return "".join(result)


def _require_mapping(data: Any, path: Path) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigInvalidError(f"expected a mapping at top level of {path}")
    return data


def parse_json(text: str, path: Path, allow_comments: bool = False) -> dict[str, Any]:
    """Parse a JSON document; empty files parse as an empty mapping.

    Raises:
        ConfigInvalidError: If the JSON is malformed or not an object
    """
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        if not allow_comments:
            raise ConfigInvalidError(f"Invalid JSON in {path}: {e}") from e
        try:
            data = json.loads(strip_jsonc_comments(text))
        except json.JSONDecodeError as inner:
            raise ConfigInvalidError(f"Invalid JSON in {path}: {inner}") from inner
    return _require_mapping(data, path)


def parse_toml(text: str, path: Path) -> dict[str, Any]:
    try:
        return tomli.loads(text)
    except tomli.TOMLDecodeError as e:
        raise ConfigInvalidError(f"Invalid TOML in {path}: {e}") from e


def parse_yaml(text: str, path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigInvalidError(f"Invalid YAML in {path}: {e}") from e
    return _require_mapping(data, path)


def dump_json(data: dict[str, Any]) -> str:
    # 2-space indent with trailing newline; key order is preserved
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def dump_toml(data: dict[str, Any]) -> str:
    try:
        return tomli_w.dumps(data)
    except (TypeError, ValueError) as e:
        raise ConfigWriteError(f"cannot encode TOML: {e}") from e


def dump_yaml(data: dict[str, Any]) -> str:
    try:
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    except yaml.YAMLError as e:
        raise ConfigWriteError(f"cannot encode YAML: {e}") from e


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Atomically replace path with content.

    ABOUTME: Creates parent directories if needed
    ABOUTME: Keeps the permission bits of an existing file

    Raises:
        ConfigPermissionError: If the directory or file is not writable
        ConfigWriteError: On any other I/O failure
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb", delete=False, dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
        ) as tf:
            tf.write(content)
            tf.flush()
            os.fsync(tf.fileno())
            tmp_name = tf.name
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except PermissionError as e:
        raise ConfigPermissionError(f"permission denied writing {path}") from e
    except OSError as e:
        raise ConfigWriteError(f"failed to write {path}: {e}") from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)

    logger.debug(f"Wrote {len(content)} bytes to {path}")


def atomic_write_text(path: Path, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))
