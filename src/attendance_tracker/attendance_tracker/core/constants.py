"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_UTC_OFFSET = "+05:30"
SIGN_IN_GRACE_MINUTES = 30
HALF_DAY_HOURS = 4
FULL_DAY_HOURS = 8
MAX_OVERTIME_HOURS = 12
MAX_HOURS_PER_DAY = 24
CAS_ATTEMPTS = 3
RECONCILE_LOOKBACK_DAYS = 1
RECONCILE_RECORD_ATTEMPTS = 2
ALLOWED_LUNCH_DURATIONS = (30, 60)
