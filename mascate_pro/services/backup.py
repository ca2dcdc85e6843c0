"""
JSON export of the whole store.

Password hashes are never exported. Restore is not offered; the snapshot is
meant for archiving and offline analysis.
"""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from mascate_pro import __version__
from mascate_pro.core.database import utcnow
from mascate_pro.core.logging_config import get_logger
from mascate_pro.core.permissions import Actor
from mascate_pro.models import ActivityLog, Category, Configuration, Product, StockMovement, User
from mascate_pro.services import activity_logger

logger = get_logger(__name__)

EXPORTED_TABLES = (
    ("users", User),
    ("categories", Category),
    ("products", Product),
    ("stock_movements", StockMovement),
    ("activity_logs", ActivityLog),
    ("configurations", Configuration),
)
EXCLUDED_COLUMNS = {"password_hash"}


def _serialize(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _row_to_dict(row) -> dict:
    return {
        column.key: _serialize(getattr(row, column.key))
        for column in inspect(row).mapper.column_attrs
        if column.key not in EXCLUDED_COLUMNS
    }


def export_snapshot(db: Session, actor: Actor) -> dict:
    snapshot = {
        "version": __version__,
        "exported_at": utcnow().isoformat(),
        "exported_by": actor.id,
    }
    counts = {}
    for name, model in EXPORTED_TABLES:
        rows = db.query(model).all()
        snapshot[name] = [_row_to_dict(row) for row in rows]
        counts[name] = len(rows)
    snapshot["counts"] = counts

    activity_logger.record(
        db, actor.id, "BACKUP_EXPORTED",
        "Backup exportado (" + ", ".join(f"{k}: {v}" for k, v in counts.items()) + ")",
        actor.ip_address, actor.user_agent,
    )
    logger.info(f"Backup exported by {actor.id}: {counts}")
    return snapshot
