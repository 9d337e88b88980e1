# Path: dependency_loader/engine/constants.py
"""
Dependency Loader Engine Constants

Transport-level constants for the HTTP handler and fetch layer.
NO HARDCODED VALUES in engine modules - all configuration here.
"""

# ============================================================================
# HTTP STATUS CODES
# ============================================================================
HTTP_OK: int = 200
HTTP_TOO_MANY_REQUESTS: int = 429
HTTP_SERVER_ERROR: int = 500
HTTP_BAD_GATEWAY: int = 502
HTTP_SERVICE_UNAVAILABLE: int = 503
HTTP_GATEWAY_TIMEOUT: int = 504
RETRYABLE_STATUS_CODES: frozenset = frozenset({
    HTTP_TOO_MANY_REQUESTS,
    HTTP_SERVER_ERROR,
    HTTP_BAD_GATEWAY,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_GATEWAY_TIMEOUT,
})

# ============================================================================
# CONNECTION SETTINGS
# ============================================================================
FORCE_CLOSE_CONNECTIONS: bool = False

# ============================================================================
# HEADERS
# ============================================================================
HEADER_USER_AGENT: str = 'User-Agent'
HEADER_ACCEPT: str = 'Accept'
HEADER_ACCEPT_ENCODING: str = 'Accept-Encoding'
DEFAULT_ACCEPT_HEADER: str = '*/*'
DEFAULT_ACCEPT_ENCODING: str = 'identity'

# ============================================================================
# PROGRESS LOGGING
# ============================================================================
PROGRESS_LOG_EVERY_CHUNKS: int = 100

# ============================================================================
# URL VALIDATION
# ============================================================================
VALID_URL_SCHEMES: frozenset = frozenset({'http', 'https'})
