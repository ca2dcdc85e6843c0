#!/usr/bin/env python3
"""scripts/prune_activity_logs.py

Delete activity log entries older than a retention window.

- `--days` : age in days (default: ACTIVITY_LOG_RETENTION_DAYS)
- `--dry-run` : report how many entries would be deleted without deleting

Usage:
  python scripts/prune_activity_logs.py --dry-run
  python scripts/prune_activity_logs.py --days 30
"""
from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path

# allow importing mascate_pro modules
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv
load_dotenv(dotenv_path=ROOT / ".env")

from sqlalchemy import func

from mascate_pro.core.config import settings
from mascate_pro.core.database import Database, utcnow
from mascate_pro.core.logging_config import setup_logging
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.services.activity_logger import prune_older_than


def count_older_than(db, days: int) -> int:
    cutoff = utcnow() - timedelta(days=days)
    return db.query(func.count(ActivityLog.id)).filter(ActivityLog.created_at < cutoff).scalar()


def main(argv=None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description='Delete old activity log entries')
    parser.add_argument('--days', type=int, default=settings.ACTIVITY_LOG_RETENTION_DAYS,
                        help='Delete entries older than this many days')
    parser.add_argument('--dry-run', action='store_true', help='Only report how many entries would go')
    args = parser.parse_args(argv)

    if args.days < 1:
        parser.error('--days must be at least 1')

    owns_database = database is None
    database = database or Database.from_settings(settings)
    try:
        with database.session() as db:
            if args.dry_run:
                print(f'{count_older_than(db, args.days)} entries older than {args.days} days would be deleted.')
                return 0
            deleted = prune_older_than(db, timedelta(days=args.days))
            print(f'Deleted {deleted} entries older than {args.days} days.')
    finally:
        if owns_database:
            database.dispose()
    return 0


if __name__ == '__main__':
    setup_logging()
    raise SystemExit(main())
