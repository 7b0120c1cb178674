"""Application-wide constants.

This module centralizes the fixed strings and numbers of the relay so the
webhook handlers, services and settings share a single source of truth.
"""

# =============================================================================
# Server
# =============================================================================

# Default listening port when PORT is not set
DEFAULT_PORT = 3000

# Body of the acknowledgement sent for every webhook delivery
EVENT_RECEIVED = "EVENT_RECEIVED"

# Body of GET / (checked by external uptime probes)
LIVENESS_TEXT = "Your bot server is running."

# Placeholder verify token used when FACEBOOK_VERIFY_TOKEN is not set
DEFAULT_VERIFY_TOKEN = "YOUR_VERIFY_TOKEN"

# Graceful shutdown timeout (seconds) for in-flight background dispatches
GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Webhook Payload
# =============================================================================

# Only notifications for this object type are processed
GROUP_OBJECT = "group"

# Change fields that carry a message worth replying to
REPLYABLE_FIELDS = frozenset({"comments", "posts"})

# Header carrying the HMAC-SHA256 signature of the raw payload
SIGNATURE_HEADER = "X-Hub-Signature-256"

# =============================================================================
# Completion (LLM)
# =============================================================================

DEFAULT_COMPLETION_MODEL = "gpt-3.5-turbo"

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful and friendly assistant in a Facebook group. "
    "Keep your answers brief."
)

# Returned instead of a completion when the provider call fails
FALLBACK_REPLY = (
    "Sorry, my AI brain is having a little trouble right now. "
    "Please try again later."
)

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API version
FACEBOOK_GRAPH_API_VERSION = "v19.0"

GRAPH_API_BASE_URL = "https://graph.facebook.com"

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Max characters of an error response body kept in logs
ERROR_BODY_LOG_CHARS = 500
