import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ANALYTICS_CACHE_TTL_SECONDS = 600
ANALYTICS_CACHE_MAX_ENTRIES = 32
ANALYTICS_MAX_RECORDS = 10000

CUSTOM_RANGE_START = "2025-01-15"
CUSTOM_RANGE_END = "2025-04-15"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
