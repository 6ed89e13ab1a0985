"""
esdump logging module.

Structured logging for the esdump CLI: a daily-rotated log file in a
platform log directory, a dedicated API-call record format, and automatic
masking of credentials before anything reaches disk.

Console output for the user goes through ``esdump.utils.console``; this
package only feeds the log file and, for warnings and errors, stderr.
"""

from .logger import (
    get_logger,
    setup_logging,
    LogLevel,
    log_api_call,
    log_export_event,
)
from .config import LogConfig
from .utils import sanitize_data, get_log_directory

__all__ = [
    "get_logger",
    "setup_logging",
    "log_api_call",
    "log_export_event",
    "LogLevel",
    "LogConfig",
    "sanitize_data",
    "get_log_directory"
]
