from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timedelta
from mascate_pro.core.config import settings
from mascate_pro.core.database import get_db
from mascate_pro.core.exceptions import NotFoundError
from mascate_pro.core.permissions import Actor, check_permission
from mascate_pro.models.user import User
from mascate_pro.schemas.activity_log import (
    ActivityLogCreate, ActivityLogPage, ActivityLogResponse, ActivityLogStats, PruneResult,
)
from mascate_pro.services import activity_logger
from mascate_pro.api.v1.dependencies import require_permission

router = APIRouter()


@router.get("", response_model=ActivityLogPage)
def get_activity_logs(
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("activity_logs", "view"))
):
    """Activity log page, newest first - Admin only"""
    return activity_logger.list_logs(
        db, user_id=user_id, action=action, date_from=date_from, date_to=date_to,
        limit=limit, offset=offset,
    )


@router.post("", response_model=ActivityLogResponse, status_code=status.HTTP_201_CREATED)
def create_activity_log(
    payload: ActivityLogCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("activity_logs", "record"))
):
    """Record a client-side event such as a page visit or logout"""
    user_id = payload.user_id or actor.id
    if user_id != actor.id:
        check_permission(actor.role, "activity_logs", "view")
        if not db.get(User, user_id):
            raise NotFoundError("User not found")

    entry = activity_logger.record(
        db, user_id, payload.action, payload.details, actor.ip_address, actor.user_agent
    )
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Activity log is temporarily unavailable",
        )
    return entry


@router.get("/stats", response_model=ActivityLogStats)
def get_activity_log_stats(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("activity_logs", "stats"))
):
    return activity_logger.log_stats(db)


@router.delete("", response_model=PruneResult)
def prune_activity_logs(
    older_than_days: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("activity_logs", "prune"))
):
    """Delete entries older than the given age - Superadmin only"""
    days = older_than_days or settings.ACTIVITY_LOG_RETENTION_DAYS
    deleted = activity_logger.prune_older_than(db, timedelta(days=days))
    return {"deleted": deleted, "older_than_days": days}
