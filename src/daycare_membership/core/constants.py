"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Shortest billable visit, in hours (15 minutes).
MIN_BILLABLE_HOURS = 0.25
HOURS_DECIMALS = 2

RFID_PATTERN = r"^[A-Z]{2}\d{6}$"

ALLOWED_PROOF_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".pdf"})
MAX_PROOF_BYTES = 5 * 1024 * 1024

DEFAULT_LIST_LIMIT = 500
