import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

TOKEN_TTL_MINUTES = int(os.getenv("TOKEN_TTL_MINUTES", "10"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "https://attendance.example.edu")

SEMESTER_START = os.getenv("SEMESTER_START", "2024-07-15")
STATS_BATCH_SIZE = int(os.getenv("STATS_BATCH_SIZE", "5"))
STATS_BATCH_DELAY_SECONDS = float(os.getenv("STATS_BATCH_DELAY_SECONDS", "0.1"))

RECHECK_INTERVAL_SECONDS = int(os.getenv("RECHECK_INTERVAL_SECONDS", "30"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
