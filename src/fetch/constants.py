"""HTTP constants for the dump fetch layer."""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NOT_MODIFIED = 304
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Chunk size for streaming reads; dumps run to hundreds of megabytes
DEFAULT_CHUNK_SIZE = 64 * 1024

# Maximum retry delay cap for rate limiting (seconds)
MAX_RETRY_AFTER_SECONDS = 60

DEFAULT_USER_AGENT = "stale-stations/0.1"
DEFAULT_TIMEOUT_SECONDS = 60.0

# ETag store written next to the downloaded dumps
DEFAULT_ETAG_CACHE_FILE = ".cache.json"

# Suffix of the partially written dump before the atomic replace
TEMP_SUFFIX = ".part"
