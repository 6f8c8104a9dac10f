"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_NOTIFICATION_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 200
DEFAULT_ADMIN_HISTORY_LIMIT = 500

BATCH_KEY_SEPARATOR = "|"
