"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SWEEP_INTERVAL_SECONDS = 300
DEFAULT_MAX_ATTENDANCE_RECORDS = 500
DEFAULT_LIST_LIMIT = 200

ISO_DATE_FORMAT = "%Y-%m-%d"
TIME_OF_DAY_FORMAT = "%H:%M"
MONTH_FORMAT = "%Y-%m"
