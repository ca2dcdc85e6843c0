from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from mascate_pro.core.database import get_db
from mascate_pro.core.permissions import Actor
from mascate_pro.schemas.admin import ConfigurationResponse, ConfigurationUpdate, StockSummary
from mascate_pro.services import analytics, backup, configurations
from mascate_pro.api.v1.dependencies import require_permission

config_router = APIRouter()
backup_router = APIRouter()
dashboard_router = APIRouter()


# Configurations
@config_router.get("", response_model=List[ConfigurationResponse])
def get_configurations(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("configurations", "view"))
):
    return configurations.list_configurations(db)


@config_router.get("/{key}", response_model=ConfigurationResponse)
def get_configuration(
    key: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("configurations", "view"))
):
    return configurations.get_configuration(db, key)


@config_router.put("/{key}", response_model=ConfigurationResponse)
def update_configuration(
    key: str,
    payload: ConfigurationUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("configurations", "edit"))
):
    """Create or replace a configuration value - Superadmin only"""
    return configurations.set_configuration(db, key, payload.value, actor, payload.description)


# Backup
@backup_router.get("/export")
def export_backup(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("backup", "export"))
):
    """Full JSON snapshot of the store, without password hashes"""
    return backup.export_snapshot(db, actor)


# Dashboard
@dashboard_router.get("/summary", response_model=StockSummary)
def get_dashboard_summary(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("dashboard", "view"))
):
    """Inventory KPIs - accessible to all authenticated users"""
    return analytics.stock_summary(db)
