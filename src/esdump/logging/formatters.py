"""
Formatters for esdump log records.

Everything written by these formatters is passed through credential
masking: structured arguments by key name, the rendered line by pattern
(``ApiKey ...`` headers, ``user:pass@`` in URLs).
"""

import logging
from datetime import datetime
from typing import Optional

from .utils import format_size, sanitize_data, sanitize_string
from esdump.constants import SENSITIVE_KEYS


class DumpFormatter(logging.Formatter):
    """
    Default formatter: ``<time> LEVEL [logger] message``.

    Timestamps, thread id and process id are optional; the stderr handler
    runs without timestamps.
    """

    def __init__(
        self,
        include_timestamps: bool = True,
        include_thread_info: bool = False,
        include_process_info: bool = False,
        sanitize_sensitive: bool = True,
        sensitive_keys: Optional[tuple] = None,
    ):
        self.sanitize_sensitive = sanitize_sensitive
        self.sensitive_keys = sensitive_keys or SENSITIVE_KEYS

        parts = ["%(asctime)s"] if include_timestamps else []
        parts += ["%(levelname)s", "[%(name)s]"]
        if include_thread_info:
            parts.append("[Thread:%(thread)d]")
        if include_process_info:
            parts.append("[PID:%(process)d]")
        parts.append("%(message)s")
        super().__init__(fmt=" ".join(parts), datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        if not self.sanitize_sensitive:
            return super().format(record)

        if isinstance(record.msg, (dict, list)):
            record.msg = sanitize_data(record.msg, self.sensitive_keys)
        if isinstance(record.args, dict):
            record.args = sanitize_data(record.args, self.sensitive_keys)
        elif isinstance(record.args, tuple):
            record.args = tuple(
                sanitize_data(arg, self.sensitive_keys) if isinstance(arg, (dict, list)) else arg
                for arg in record.args
            )
        return sanitize_string(super().format(record))


class APICallFormatter(logging.Formatter):
    """
    One line per HTTP call, plus an indented error line when it failed:

        2026-10-17 10:02:11 DEBUG [esdump.api] POST http://es:9200/_search -> 200 (31.2ms) index=logs sent=182B received=48.1KB
    """

    def __init__(self, sanitize_sensitive: bool = True, sensitive_keys: Optional[tuple] = None):
        self.sanitize_sensitive = sanitize_sensitive
        self.sensitive_keys = sensitive_keys or SENSITIVE_KEYS
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        status = getattr(record, "api_status", None) or "---"
        duration_ms = round((getattr(record, "api_duration", 0) or 0) * 1000, 2)

        fields = [
            f"{getattr(record, 'api_method', 'UNKNOWN')} {getattr(record, 'api_url', '')}",
            f"-> {status} ({duration_ms}ms)",
        ]
        index = getattr(record, "api_index", None)
        if index:
            fields.append(f"index={index}")
        request_size = getattr(record, "api_request_size", None)
        if request_size is not None:
            fields.append(f"sent={format_size(request_size)}")
        response_size = getattr(record, "api_response_size", None)
        if response_size is not None:
            fields.append(f"received={format_size(response_size)}")

        text = f"{timestamp} {record.levelname} [{record.name}] {' '.join(fields)}"
        api_error = getattr(record, "api_error", None)
        if api_error:
            text += f"\n    Error: {api_error}"

        return sanitize_string(text) if self.sanitize_sensitive else text


class MultiplexFormatter(logging.Formatter):
    """Routes API call records to ``api_formatter``, the rest to ``default_formatter``"""

    def __init__(
        self, default_formatter: logging.Formatter, api_formatter: logging.Formatter
    ):
        self.default_formatter = default_formatter
        self.api_formatter = api_formatter
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, "api_method"):
            return self.api_formatter.format(record)
        return self.default_formatter.format(record)
