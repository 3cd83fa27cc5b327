import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

CRON_SECRET = "test-cron-secret"

DEFAULT_UTC_OFFSET = "+05:30"
SIGN_IN_GRACE_MINUTES = 30
CAS_ATTEMPTS = 3
RECONCILE_LOOKBACK_DAYS = 1
RECONCILE_RECORD_ATTEMPTS = 2
