import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

CRON_SECRET = os.getenv("CRON_SECRET", "please-set-CRON_SECRET")

DEFAULT_UTC_OFFSET = os.getenv("DEFAULT_UTC_OFFSET", "+05:30")
SIGN_IN_GRACE_MINUTES = int(os.getenv("SIGN_IN_GRACE_MINUTES", "30"))
CAS_ATTEMPTS = int(os.getenv("CAS_ATTEMPTS", "3"))
RECONCILE_LOOKBACK_DAYS = int(os.getenv("RECONCILE_LOOKBACK_DAYS", "1"))
RECONCILE_RECORD_ATTEMPTS = int(os.getenv("RECONCILE_RECORD_ATTEMPTS", "2"))
