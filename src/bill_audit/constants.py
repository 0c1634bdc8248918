"""
Project-wide constants for bill-audit
"""  # noqa: D200, D212, D415

# ==============================================================================
# Model and Network Configuration
# ==============================================================================

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_REQUEST_TIMEOUT = 120.0  # seconds

# Primary attempt plus one repair attempt
MAX_MODEL_CALLS = 2

# ==============================================================================
# Document Input Configuration
# ==============================================================================

_MB = 1024 * 1024

MAX_DOCUMENT_SIZE = 20 * _MB  # Inline request payload limit

SUPPORTED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/heic",
        "image/heif",
    }
)

# ==============================================================================
# Sanitizer Limits and Defaults
# ==============================================================================

MAX_REASONS = 6
MAX_SAVINGS_TIPS = 5

# Likelihood at which a dispute email becomes mandatory
EMAIL_LIKELIHOOD_THRESHOLD = 50
MIN_EMAIL_LENGTH = 20

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PIN_COORDINATE = 50.0

DEFAULT_ISSUE = "Unspecified issue"
DEFAULT_EVIDENCE = "No evidence provided"
DEFAULT_TIP_TITLE = "Tip"
DEFAULT_AVERAGE_RANGE = "Unknown"
DEFAULT_EXPLANATION = "No comparison explanation provided."
ABOVE_AVERAGE_STATEMENT = "Above average for your region"
ABOUT_AVERAGE_STATEMENT = "About average for your region"

DISPUTE_EMAIL_TEMPLATE = (
    "Dear Customer Service,\n\n"
    "I’m reaching out regarding my recent utility bill. I noticed charges "
    "and/or usage that appear unusual and I would appreciate a review of the "
    "bill for potential errors or miscalculations. Please provide an itemized "
    "explanation of any fees or adjustments, and let me know if a correction "
    "or credit is warranted.\n\n"
    "Thank you,\n"
    "[Your Name]\n"
    "[Address]\n"
    "[Account Number]"
)

# ==============================================================================
# Presentation Configuration
# ==============================================================================

# Pins are kept inside the page edges when drawn
PIN_DISPLAY_MIN = 3.0
PIN_DISPLAY_MAX = 97.0

FALLBACK_PROVIDER_EMAIL = "customer.service@provider.com"

# Raw model text is truncated to this length in log records
LOG_EXCERPT_LENGTH = 200
