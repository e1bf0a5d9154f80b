import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Analytics engine
ANALYTICS_CACHE_TTL_SECONDS = int(os.getenv("ANALYTICS_CACHE_TTL_SECONDS", "600"))
ANALYTICS_CACHE_MAX_ENTRIES = int(os.getenv("ANALYTICS_CACHE_MAX_ENTRIES", "256"))
ANALYTICS_MAX_RECORDS = int(os.getenv("ANALYTICS_MAX_RECORDS", "10000"))

# Window used by timeRange=custom when no startDate/endDate is given (first semester)
CUSTOM_RANGE_START = os.getenv("CUSTOM_RANGE_START", "2025-01-15")
CUSTOM_RANGE_END = os.getenv("CUSTOM_RANGE_END", "2025-04-15")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
