"""
Main logging module for esdump.

Sets up the ``esdump`` logger hierarchy: a daily-rotated file handler for
everything at the configured level, a stderr handler for warnings and
errors, and the ``esdump.api`` logger for HTTP call records.
"""

import logging
import logging.handlers
import sys
from typing import Optional, Dict, Any

from .config import LogConfig, LogLevel, get_log_file_path
from .formatters import DumpFormatter, APICallFormatter, MultiplexFormatter
from .utils import cleanup_old_logs, sanitize_data
from esdump.constants import SENSITIVE_KEYS


_loggers: Dict[str, logging.Logger] = {}
_logging_configured = False
_log_config: Optional[LogConfig] = None


def _user_settings() -> Dict[str, Any]:
    """Contents of the user's settings.json, empty when unreadable"""
    from esdump.utils.config_store import ConfigStore

    try:
        return ConfigStore().get_settings()
    except OSError:
        return {}


def _rotating_handler(log_file_path, config: LogConfig) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_file_path,
        when="midnight",
        interval=1,
        backupCount=config.log_retention_days,
        encoding="utf-8",
        utc=False,
    )
    handler.suffix = "%Y-%m-%d"
    return handler


def setup_logging(config: Optional[LogConfig] = None, force_reconfigure: bool = False) -> None:
    """
    Set up the esdump logging system.

    Args:
        config: LogConfig instance, built from user settings if None
        force_reconfigure: Reconfigure even if already set up
    """
    global _logging_configured, _log_config

    if _logging_configured and not force_reconfigure:
        return

    if config is None:
        config = LogConfig().with_settings(_user_settings())

    _log_config = config
    log_file_path = get_log_file_path(config)

    root_logger = logging.getLogger("esdump")
    root_logger.setLevel(getattr(logging, config.default_level.value))
    root_logger.handlers.clear()

    file_handler = _rotating_handler(log_file_path, config)
    file_handler.setLevel(getattr(logging, config.default_level.value))
    file_handler.setFormatter(
        DumpFormatter(
            include_timestamps=config.include_timestamps,
            include_thread_info=config.include_thread_info,
            include_process_info=config.include_process_info,
            sanitize_sensitive=config.sanitize_sensitive_data,
            sensitive_keys=config.sensitive_keys,
        )
    )
    root_logger.addHandler(file_handler)

    # stdout carries the export itself, so the console handler must use stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, config.console_level.value))
    console_handler.setFormatter(
        DumpFormatter(
            include_timestamps=False,
            sanitize_sensitive=config.sanitize_sensitive_data,
            sensitive_keys=config.sensitive_keys,
        )
    )
    root_logger.addHandler(console_handler)

    api_logger = logging.getLogger("esdump.api")
    api_logger.setLevel(logging.DEBUG)
    api_logger.handlers.clear()

    if config.log_api_requests:
        api_handler = _rotating_handler(log_file_path, config)
        api_handler.setLevel(logging.DEBUG)
        api_handler.setFormatter(
            MultiplexFormatter(
                default_formatter=DumpFormatter(
                    sanitize_sensitive=config.sanitize_sensitive_data,
                    sensitive_keys=config.sensitive_keys,
                ),
                api_formatter=APICallFormatter(
                    sanitize_sensitive=config.sanitize_sensitive_data,
                    sensitive_keys=config.sensitive_keys,
                ),
            )
        )
        api_logger.addHandler(api_handler)

    api_logger.propagate = False

    try:
        cleanup_old_logs(log_file_path.parent, config.log_retention_days)
    except OSError:
        pass

    _logging_configured = True

    get_logger("esdump.setup").info(
        f"Logging initialized - File: {log_file_path}, "
        f"Level: {config.default_level.value}"
    )


def get_log_config() -> LogConfig:
    """Active logging configuration (defaults before setup)"""
    return _log_config or LogConfig()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified name.

    Args:
        name: Logger name (e.g., 'esdump.commands.dump')
    """
    if not _logging_configured:
        setup_logging()

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_api_call(
    method: str,
    url: str,
    status_code: Optional[int] = None,
    duration: Optional[float] = None,
    request_size: Optional[int] = None,
    response_size: Optional[int] = None,
    index: Optional[str] = None,
    error: Optional[str] = None,
    logger_name: str = "esdump.api"
) -> None:
    """
    Log an HTTP call against the search backend.

    Transport failures and 5xx responses are logged as errors, 4xx as
    warnings and everything else at DEBUG.

    Args:
        method: HTTP method
        url: Request URL
        status_code: Response status code, None when no response arrived
        duration: Request duration in seconds
        request_size: Request payload size in bytes
        response_size: Response payload size in bytes
        index: Index the call was made for
        error: Error message if the request failed
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)

    extra = {
        "api_method": method,
        "api_url": url,
        "api_status": status_code,
        "api_duration": duration or 0,
    }
    if request_size is not None:
        extra["api_request_size"] = request_size
    if response_size is not None:
        extra["api_response_size"] = response_size
    if index:
        extra["api_index"] = index
    if error:
        extra["api_error"] = error

    if error or (status_code and status_code >= 500):
        logger.error("API call failed", extra=extra)
    elif status_code and 400 <= status_code < 500:
        logger.warning("API call client error", extra=extra)
    else:
        logger.debug("API call completed", extra=extra)


def log_export_event(
    event: str,
    level: str = "info",
    index: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    logger_name: str = "esdump.export"
) -> None:
    """
    Log a milestone or diagnostic of an export run.

    Args:
        event: Description of the event
        level: Log level name (debug, info, warning, error)
        index: Index the event belongs to
        details: Additional details, sanitized before logging
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)
    extra = {"export_event": event}
    message = f"Export: {event}"

    if index:
        extra["export_index"] = index
        message = f"Export [{index}]: {event}"
    if details:
        sanitized = sanitize_data(details, SENSITIVE_KEYS)
        extra["export_details"] = sanitized
        message = f"{message} {sanitized}"

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(message, extra=extra)
