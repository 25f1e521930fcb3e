"""Materialize recurring classes for the rolling window.

Meant to run from cron, e.g. nightly:

    APP_ENV=production python scripts/generate_classes.py

Exits with status 1 when any series reported an error so the scheduler can
alert; rerunning is always safe since generation is idempotent.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv

from academy_scheduler.common.datetime_utils import add_days, parse_calendar_date, today_local
from academy_scheduler.common.logging import get_logger, setup_logging
from academy_scheduler.config import get_settings_module
from academy_scheduler.container import build_container

log = get_logger("generate_classes")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--start", type=parse_calendar_date, help="first date (YYYY-MM-DD), default today")
    parser.add_argument("--end", type=parse_calendar_date, help="last date (YYYY-MM-DD), default start + window")
    parser.add_argument("--series-id", type=int, help="only this series")
    parser.add_argument("--timeout", type=float, help="seconds before unfinished series are reported")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(json_output=bool(settings.LOG_JSON), log_level=str(settings.LOG_LEVEL))
    args = parse_args(argv)

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    start = args.start or today_local()
    end = args.end or add_days(start, container.generation_window_days)

    result = container.instance_generator.generate(
        window_start=start,
        window_end=end,
        series_id=args.series_id,
        timeout=args.timeout,
    )
    for failure in result.errors:
        log.error(
            "generate_classes.series_failed",
            series_id=failure.series_id,
            failed_date=str(failure.failed_date) if failure.failed_date else None,
            retryable=failure.retryable,
            error=failure.message,
        )
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
