"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CURRENCY_SYMBOL = "₼"
DEFAULT_SESSION_DAYS = 7
DEFAULT_STATS_MAX_WORKERS = 8
MAX_WORKER_NAME_LENGTH = 120
MAX_NOTES_LENGTH = 500
