"""Run the auto sign-out reconciler once (for cron / systemd timers).

Exit code is 1 when any company or record failed, so schedulers can alert.
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.main import configure_logging


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        default_utc_offset=settings.DEFAULT_UTC_OFFSET,
        lookback_days=settings.RECONCILE_LOOKBACK_DAYS,
        record_attempts=settings.RECONCILE_RECORD_ATTEMPTS,
    )
    report = container.reconciler.run()
    print(json.dumps(report.to_dict(), indent=2))
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
