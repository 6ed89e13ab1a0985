"""
Global constants for the esdump CLI.
"""

# Export defaults
DEFAULT_BATCH_SIZE = 500
DEFAULT_KEEP_ALIVE = "1m"
DEFAULT_REQUEST_TIMEOUT = 60  # seconds, per request

# Consecutive malformed responses tolerated before the run is aborted
MALFORMED_RESPONSE_LIMIT = 3

# Time units accepted by the backend for keep-alive values
KEEP_ALIVE_PATTERN = r"^\d+(d|h|m|s|ms|micros|nanos)$"

# Pagination order: cheapest stable order under point-in-time search
SHARD_DOC_SORT = [{"_shard_doc": {"order": "asc"}}]

# HTTP Headers
DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Environment variables for connection settings
ENV_URL = "ESDUMP_URL"
ENV_USERNAME = "ESDUMP_USERNAME"
ENV_PASSWORD = "ESDUMP_PASSWORD"
ENV_API_KEY = "ESDUMP_API_KEY"
ENV_INSECURE = "ESDUMP_INSECURE"
ENV_TIMEOUT = "ESDUMP_TIMEOUT"
ENV_LOG_DIR = "ESDUMP_LOG_DIR"

# Keyring service prefix for profile secrets
KEYRING_SERVICE = "esdump"

# Logging constants
LOG_APP_NAME = "ESDUMP"
LOG_FILE_NAME = "esdump"
LOG_RETENTION_DAYS = 7
LOG_LINES_TO_SHOW = 20

# Sensitive data keys for sanitization
SENSITIVE_KEYS = (
    "password", "api_key", "apikey", "authorization", "secret", "token",
    "cookie", "x-api-key", "credentials"
)
