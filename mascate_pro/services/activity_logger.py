"""
Append-only activity log: who did what, from where.

Entries are written two ways. ``add_entry`` stages a row in the caller's
unit of work so the audit record commits (or rolls back) together with the
change it describes. ``record`` is the standalone path used for events such
as logins; a storage failure there is logged and swallowed so it never fails
the operation being audited.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mascate_pro.core.config import settings
from mascate_pro.core.database import utcnow
from mascate_pro.core.logging_config import get_logger
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.models.user import User

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def add_entry(
    db: Session,
    user_id: Optional[str],
    action: str,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ActivityLog:
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        details=details,
        ip_address=ip_address,
        user_agent=user_agent[:500] if user_agent else None,
    )
    db.add(entry)
    return entry


def record(
    db: Session,
    user_id: Optional[str],
    action: str,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    max_entries: Optional[int] = None,
) -> Optional[ActivityLog]:
    """Write and commit one entry. Returns None if it could not be stored."""
    try:
        entry = add_entry(db, user_id, action, details, ip_address, user_agent)
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to record activity {action} for user {user_id}", exc_info=True)
        return None

    try:
        enforce_cap(db, max_entries or settings.ACTIVITY_LOG_MAX_ENTRIES)
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Activity log retention cleanup failed", exc_info=True)

    return entry


def enforce_cap(db: Session, max_entries: int) -> int:
    """Delete everything but the newest ``max_entries`` entries."""
    total = db.query(func.count(ActivityLog.id)).scalar()
    if total <= max_entries:
        return 0

    newest = (
        select(ActivityLog.id)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(max_entries)
    )
    deleted = (
        db.query(ActivityLog)
        .filter(ActivityLog.id.not_in(newest))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info(f"Activity log capped at {max_entries} entries, removed {deleted}")
    return deleted


def prune_older_than(db: Session, age: timedelta) -> int:
    cutoff = utcnow() - age
    try:
        deleted = (
            db.query(ActivityLog)
            .filter(ActivityLog.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info(f"Pruned {deleted} activity log entries older than {cutoff.isoformat()}")
    return deleted


def list_logs(
    db: Session,
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)

    query = db.query(ActivityLog)
    if user_id:
        query = query.filter(ActivityLog.user_id == user_id)
    if action:
        query = query.filter(ActivityLog.action == action)
    if date_from:
        query = query.filter(ActivityLog.created_at >= date_from)
    if date_to:
        query = query.filter(ActivityLog.created_at <= date_to)

    total = query.count()
    items = (
        query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {
        "items": items,
        "total": total,
        "limit": limit,
        "offset": offset,
        "has_more": offset + limit < total,
    }


def log_stats(db: Session, top: int = 5) -> dict:
    now = utcnow()
    today_start = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)
    yesterday_start = today_start - timedelta(days=1)

    def count_between(start, end=None):
        query = db.query(func.count(ActivityLog.id)).filter(ActivityLog.created_at >= start)
        if end is not None:
            query = query.filter(ActivityLog.created_at < end)
        return query.scalar()

    action_counts = dict(
        db.query(ActivityLog.action, func.count(ActivityLog.id))
        .group_by(ActivityLog.action)
        .all()
    )

    top_users = (
        db.query(ActivityLog.user_id, User.display_name, func.count(ActivityLog.id).label("activity"))
        .join(User, User.id == ActivityLog.user_id)
        .group_by(ActivityLog.user_id, User.display_name)
        .order_by(func.count(ActivityLog.id).desc())
        .limit(top)
        .all()
    )

    return {
        "total_logs": db.query(func.count(ActivityLog.id)).scalar(),
        "today_logs": count_between(today_start),
        "yesterday_logs": count_between(yesterday_start, today_start),
        "action_counts": action_counts,
        "top_users": [
            {"user_id": uid, "display_name": name, "activity_count": count}
            for uid, name, count in top_users
        ],
        "generated_at": now,
    }
