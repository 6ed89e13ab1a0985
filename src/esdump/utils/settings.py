"""
Run settings for an export and for the backend connection.

Values arrive from the command line, the environment or a saved profile;
these classes only hold and validate them.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

import httpx

from esdump.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_KEEP_ALIVE,
    DEFAULT_REQUEST_TIMEOUT,
    KEEP_ALIVE_PATTERN,
)
from esdump.errors import ConfigurationError


def parse_indices(value: str) -> List[str]:
    """Split a comma separated index list, dropping blanks"""
    indices = [part.strip() for part in (value or "").split(",") if part.strip()]
    if not indices:
        raise ConfigurationError("At least one index name is required")
    return indices


def normalize_url(url: str) -> str:
    url = (url or "").strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"Invalid cluster URL '{url}': expected http(s)://host[:port]"
        )
    return url


@dataclass
class ExportSettings:
    indices: List[str]
    batch_size: int = DEFAULT_BATCH_SIZE
    keep_alive: str = DEFAULT_KEEP_ALIVE
    output: Optional[str] = None
    request_timeout: Optional[float] = None  # None: the connection default
    release_snapshots: bool = True
    strict: bool = False
    show_progress: bool = True

    def __post_init__(self):
        if not self.indices:
            raise ConfigurationError("At least one index name is required")
        if self.batch_size <= 0:
            raise ConfigurationError(
                f"Batch size must be a positive integer, got {self.batch_size}"
            )
        if not re.match(KEEP_ALIVE_PATTERN, self.keep_alive or ""):
            raise ConfigurationError(
                f"Invalid keep-alive '{self.keep_alive}' (examples: 30s, 1m, 2h)"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("Request timeout must be positive")


@dataclass
class ConnectionSettings:
    url: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    api_key: Optional[str] = field(default=None, repr=False)
    insecure: bool = False
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self):
        self.url = normalize_url(self.url)
        if bool(self.username) != bool(self.password):
            raise ConfigurationError(
                "Both --username and --password must be provided together."
            )
        if self.api_key and (self.username or self.password):
            raise ConfigurationError(
                "Use either --api-key or --username/--password, not both."
            )

    @property
    def auth_method(self) -> str:
        if self.api_key:
            return "api-key"
        if self.username:
            return "basic"
        return "none"

    def build_auth(self) -> Tuple[Optional[httpx.Auth], Dict[str, str]]:
        """httpx auth object and extra headers for this connection"""
        if self.api_key:
            return None, {"Authorization": f"ApiKey {self.api_key}"}
        if self.username:
            return httpx.BasicAuth(self.username, self.password), {}
        return None, {}
