"""Centralized constants for the leitner scheduler.

All magic numbers and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Buckets ----------
MAX_ACTIVE_BUCKET = 4  # Promotion past this index retires the card
RETIRED_BUCKET = -1  # Wire sentinel for "no bucket after review"

# ---------- Hints ----------
NO_HINT_MESSAGE = "No hint available for this card."

# ---------- HTTP ----------
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001
REQUEST_TIMEOUT = 30.0
RESPONSIVENESS_TIMEOUT = 2.0
