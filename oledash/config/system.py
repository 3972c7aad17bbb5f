"""
System-Wide Configuration
"""

# =============================================================================
# Logging
# =============================================================================
LOG_LEVEL = 'INFO'  # DEBUG, INFO, WARNING, ERROR, CRITICAL

# =============================================================================
# Threading
# =============================================================================
THREAD_JOIN_TIMEOUT = 2.0  # seconds - max time to wait for threads to stop

# =============================================================================
# External Services
# =============================================================================
HTTP_TIMEOUT = 3.0  # seconds - hard per-request timeout for HTTP readers
AVAILABILITY_CACHE_TTL = 5.0  # seconds - how long a reachability check is trusted
SUBPROCESS_TIMEOUT = 1.0  # seconds - clipboard tool invocations

# =============================================================================
# Preview Server
# =============================================================================
PREVIEW_HOST = '0.0.0.0'
PREVIEW_PORT = 5000
PREVIEW_ENABLE = False
