"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CACHE_TTL_SECONDS = 10 * 60
DEFAULT_CACHE_MAX_ENTRIES = 256
DEFAULT_MAX_RECORDS = 10_000
MOVING_AVERAGE_WINDOW = 7
DEFAULT_ABSENTEE_LIMIT = 20
MAX_ABSENTEE_LIMIT = 100
DEFAULT_CUSTOM_RANGE = ("2025-01-15", "2025-04-15")
