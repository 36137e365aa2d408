"""
Configuration: backend endpoints, collection names, display constants.

Values can be overridden through environment variables (or a local .env
file) so the same build can point at a staging WordPress install.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Backend endpoints
# ---------------------------------------------------------------------------
API_BASE = os.getenv("LAUNDRY_API_BASE", "https://amalaundry.com.au/wp-json/wp/v2")
AUTH_URL = os.getenv("LAUNDRY_AUTH_URL", "https://amalaundry.com.au/wp-json/jwt-auth/v1/token")

# Optional WordPress nonce, sent as X-WP-Nonce when present
WP_NONCE = os.getenv("LAUNDRY_WP_NONCE")

REQUEST_TIMEOUT = float(os.getenv("LAUNDRY_REQUEST_TIMEOUT", "30"))

# ---------------------------------------------------------------------------
# Token store
# ---------------------------------------------------------------------------
TOKEN_KEY = "jwt"
TOKEN_FILE = Path(os.getenv("LAUNDRY_TOKEN_FILE", Path.home() / ".laundry_dashboard" / "token.json"))

# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------
ORDER_COLLECTION = "laundry_order"
SERVICE_COLLECTION = "service"
PICKUP_SLOT_COLLECTION = "pickup_slot"
CAMP_COLLECTION = "camp"
PAYMENT_METHOD_COLLECTION = "payment_method"
MEDIA_ENDPOINT = "media"
UPDATE_STATUS_ENDPOINT = "update_order_status"

PER_PAGE = 100

# Service images accepted by the media upload
MAX_IMAGE_BYTES = 5 * 1024 * 1024

# ---------------------------------------------------------------------------
# Order status values
# ---------------------------------------------------------------------------
STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

VIEW_MODES = ("all", "pending", "completed", "cancelled")

# ---------------------------------------------------------------------------
# Display constants
# ---------------------------------------------------------------------------
PLACEHOLDER = "—"
UNKNOWN_CAMP = "Unknown Camp"
NO_DATA = "No data"
DEFAULT_TOTAL_PRICE = "0.00"
CURRENCY = "AUD"
