import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_test"),
}

TOKEN_TTL_MINUTES = 10
PUBLIC_BASE_URL = "http://testserver"

SEMESTER_START = "2024-07-15"
STATS_BATCH_SIZE = 5
STATS_BATCH_DELAY_SECONDS = 0.0

RECHECK_INTERVAL_SECONDS = 30

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
