"""
Application-wide constants for reqchain.

MIME types written by the request builder and defaults shared by the
client, configuration and CLI layers.
"""

# Body content types
MIME_FORM = "application/x-www-form-urlencoded"
MIME_JSON = "application/json"
MIME_OCTET_STREAM = "binary/octet-stream"
MIME_MULTIPART_FORM = "multipart/form-data"
DEFAULT_PART_CONTENT_TYPE = "application/octet-stream"

# Field name used by single-file multipart uploads
DEFAULT_FILE_FIELD = "file"

# Network defaults
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_CONNECTION_TIMEOUT = 10
MAX_TIMEOUT_SECONDS = 300
DEFAULT_MAX_RETRIES = 0
MAX_RETRIES_LIMIT = 10
DEFAULT_BACKOFF_FACTOR = 0.3
RETRY_STATUS_FORCELIST = [429, 500, 502, 503, 504]
DEFAULT_USER_AGENT = "reqchain/0.1"

# HTTP methods
HTTP_METHODS = (
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "HEAD",
    "TRACE",
    "OPTIONS",
    "CONNECT",
)

# Logging defaults
DEFAULT_LOG_FILE_SIZE_BYTES = 10 * 1024 * 1024
MIN_LOG_FILE_SIZE_BYTES = 1024
DEFAULT_LOG_BACKUP_COUNT = 5

# CLI exit codes
EXIT_OK = 0
EXIT_TRANSPORT_ERROR = 1
EXIT_BUILD_ERROR = 2
EXIT_CONFIG_ERROR = 3
