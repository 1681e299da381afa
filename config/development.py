import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

# Session tokens
TOKEN_TTL_MINUTES = int(os.getenv("TOKEN_TTL_MINUTES", "10"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

# Statistics
SEMESTER_START = os.getenv("SEMESTER_START", "2024-07-15")
STATS_BATCH_SIZE = int(os.getenv("STATS_BATCH_SIZE", "5"))
STATS_BATCH_DELAY_SECONDS = float(os.getenv("STATS_BATCH_DELAY_SECONDS", "0.1"))

# Client-side idle re-check
RECHECK_INTERVAL_SECONDS = int(os.getenv("RECHECK_INTERVAL_SECONDS", "30"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
