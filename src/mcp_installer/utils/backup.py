# ABOUTME: Backup utilities for tool configuration files.
# ABOUTME: Backups are timestamped siblings of the original and are never cleaned up.
import logging
import shutil
from datetime import datetime
from pathlib import Path

from mcp_installer.errors import (
    BackupExistsError,
    ConfigBackupError,
    ConfigRestoreError,
    FileAccessError,
)
from mcp_installer.utils.fileio import atomic_write_bytes

logger = logging.getLogger(__name__)

# ABOUTME: Backup format: {original}.backup_{YYYYMMDD}_{HHMMSS}
BACKUP_SUFFIX = ".backup_"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def backup_path_for(source_path: Path, now: datetime | None = None) -> Path:
    """Return the sibling backup path for source_path at the given time.

    Examples:
        >>> backup_path_for(Path("/home/u/.claude.json"), datetime(2026, 1, 8, 14, 30, 22))
        PosixPath('/home/u/.claude.json.backup_20260108_143022')
    """
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return source_path.with_name(f"{source_path.name}{BACKUP_SUFFIX}{timestamp}")


def create_backup(source_path: Path, now: datetime | None = None) -> Path | None:
    """Copy a config file to a timestamped sibling before a destructive write.

    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Returns None when there is nothing to back up yet

    Args:
        source_path: Live config file
        now: Timestamp to use (defaults to current local time)

    Returns:
        Path to the created backup, or None if source_path does not exist

    Raises:
        BackupExistsError: If a backup with the same timestamp already exists
        ConfigBackupError: If the copy fails
    """
    if not source_path.exists():
        logger.info(f"No existing config to backup at {source_path}")
        return None

    backup_path = backup_path_for(source_path, now)
    if backup_path.exists():
        raise BackupExistsError(f"backup file already exists: {backup_path}")

    try:
        shutil.copy2(source_path, backup_path)
    except OSError as e:
        raise ConfigBackupError(f"failed to backup {source_path}: {e}") from e

    logger.info(f"Created configuration backup {backup_path}")
    return backup_path


def restore_backup(backup_path: Path, target_path: Path) -> None:
    """Copy a backup back over the live config file.

    Raises:
        ConfigRestoreError: If the backup is missing or the write fails
    """
    try:
        content = backup_path.read_bytes()
    except FileNotFoundError as e:
        raise ConfigRestoreError(f"backup not found: {backup_path}") from e
    except OSError as e:
        raise ConfigRestoreError(f"failed to read backup {backup_path}: {e}") from e

    try:
        atomic_write_bytes(target_path, content)
    except FileAccessError as e:
        raise ConfigRestoreError(f"failed to restore {target_path}: {e}") from e

    logger.info(f"Restored configuration {target_path} from {backup_path}")
