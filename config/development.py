import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed a demo company and employees on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Empty secret leaves /api/cron open (local testing only)
CRON_SECRET = os.getenv("CRON_SECRET", "")

DEFAULT_UTC_OFFSET = os.getenv("DEFAULT_UTC_OFFSET", "+05:30")
SIGN_IN_GRACE_MINUTES = int(os.getenv("SIGN_IN_GRACE_MINUTES", "30"))
CAS_ATTEMPTS = int(os.getenv("CAS_ATTEMPTS", "3"))
RECONCILE_LOOKBACK_DAYS = int(os.getenv("RECONCILE_LOOKBACK_DAYS", "1"))
RECONCILE_RECORD_ATTEMPTS = int(os.getenv("RECONCILE_RECORD_ATTEMPTS", "2"))
