"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date

DEFAULT_TOKEN_TTL_MINUTES = 10
DEFAULT_RECHECK_INTERVAL_SECONDS = 30
DEFAULT_FRAME_INTERVAL_SECONDS = 1 / 30
DEFAULT_STATS_BATCH_SIZE = 5
DEFAULT_STATS_BATCH_DELAY_SECONDS = 0.1
DEFAULT_TREND_WEEKS = 4
DEFAULT_TREND_MONTHS = 2
DEFAULT_SEMESTER_START = date(2024, 7, 15)
DEFAULT_PUBLIC_BASE_URL = "http://localhost:5000"

SCAN_PATH_PREFIX = "/student/class/"
SCAN_TOKEN_PARAM = "qr"
