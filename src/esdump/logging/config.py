"""
Where esdump logs go and at which levels.

The log directory follows platform conventions (XDG state directory on
Linux) unless ``ESDUMP_LOG_DIR`` points somewhere else. Levels and
retention can be persisted in ``settings.json`` through
``esdump config log-level``.
"""

import os
import platform
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from esdump.constants import (
    ENV_LOG_DIR,
    LOG_FILE_NAME,
    LOG_RETENTION_DAYS,
    SENSITIVE_KEYS,
)


class LogLevel(Enum):
    """Log levels accepted in settings and on the command line"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: Any) -> Optional["LogLevel"]:
        """Case-insensitive lookup, None for anything unknown"""
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None


@dataclass
class LogConfig:
    log_filename: str = f"{LOG_FILE_NAME}.log"
    log_retention_days: int = LOG_RETENTION_DAYS

    # file handler level; the stderr handler only shows problems
    default_level: LogLevel = LogLevel.INFO
    console_level: LogLevel = LogLevel.WARNING

    include_timestamps: bool = True
    include_thread_info: bool = False
    include_process_info: bool = False

    # one record per HTTP call in the esdump.api logger
    log_api_requests: bool = True
    # response bodies quoted in index failure diagnostics are cut here
    max_payload_size: int = 1024

    sanitize_sensitive_data: bool = True
    sensitive_keys: tuple = SENSITIVE_KEYS

    def with_settings(self, settings: Dict[str, Any]) -> "LogConfig":
        """
        Copy of this config with values from ``settings.json`` applied.

        Recognized keys: ``log_level``, ``console_log_level``,
        ``log_retention_days`` and ``log_api_requests``. Unknown or
        invalid values are ignored.
        """
        changes: Dict[str, Any] = {}

        level = LogLevel.parse(settings.get("log_level"))
        if level:
            changes["default_level"] = level
        console_level = LogLevel.parse(settings.get("console_log_level"))
        if console_level:
            changes["console_level"] = console_level

        retention = settings.get("log_retention_days")
        if isinstance(retention, int) and not isinstance(retention, bool) and retention > 0:
            changes["log_retention_days"] = retention
        if isinstance(settings.get("log_api_requests"), bool):
            changes["log_api_requests"] = settings["log_api_requests"]

        return replace(self, **changes)


def _platform_log_directory() -> Path:
    system = platform.system().lower()

    if system == "windows":
        base_dir = Path(os.environ.get("APPDATA", ""))
        if not base_dir.exists():
            base_dir = Path.home()
        return base_dir / LOG_FILE_NAME / "logs"

    if system == "darwin":
        return Path.home() / "Library" / "Logs" / LOG_FILE_NAME

    state_home = os.environ.get("XDG_STATE_HOME")
    base_dir = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base_dir / LOG_FILE_NAME / "logs"


def get_log_directory() -> Path:
    """
    Directory for esdump log files, created if needed.

    ``ESDUMP_LOG_DIR`` wins over the platform default. When the directory
    cannot be created, ``./logs`` is used instead.
    """
    override = os.environ.get(ENV_LOG_DIR)
    log_dir = Path(override).expanduser() if override else _platform_log_directory()

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir
    except OSError:
        fallback_dir = Path.cwd() / "logs"
        fallback_dir.mkdir(exist_ok=True)
        return fallback_dir


def get_log_file_path(config: Optional[LogConfig] = None) -> Path:
    """Full path to the active log file"""
    return get_log_directory() / (config or LogConfig()).log_filename
