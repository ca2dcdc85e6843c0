from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from mascate_pro.core.database import get_db
from mascate_pro.core.permissions import Actor, check_permission
from mascate_pro.schemas.inventory import (
    LedgerReport, MovementResult, MovementType, ProductResponse,
    StockMovementCreate, StockMovementResponse,
)
from mascate_pro.services import ledger
from mascate_pro.api.v1.dependencies import require_permission

router = APIRouter()


@router.get("", response_model=List[StockMovementResponse])
def get_stock_movements(
    product_id: Optional[str] = None,
    movement_type: Optional[MovementType] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("stock", "view"))
):
    """Stock movements, newest first"""
    return ledger.list_movements(
        db, product_id=product_id, movement_type=movement_type,
        date_from=date_from, date_to=date_to, limit=limit, offset=offset,
    )


@router.post("", response_model=MovementResult, status_code=status.HTTP_201_CREATED)
def create_stock_movement(
    payload: StockMovementCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("stock", "move"))
):
    """
    Record a sale, purchase, return, loss or adjustment

    The author is always the authenticated user. Adjustments set the stock to
    the counted ``new_stock`` and need the admin role. ``previous_stock``, when
    sent, must match the current stock or the request is rejected with 409.
    """
    if payload.movement_type == "adjustment":
        check_permission(actor.role, "stock", "adjust")

    product, movement = ledger.apply_movement(
        db,
        payload.product_id,
        payload.movement_type,
        actor,
        quantity=payload.quantity,
        unit_price=payload.unit_price,
        notes=payload.notes,
        new_stock=payload.new_stock,
        expected_stock=payload.previous_stock,
    )
    return {"product": ProductResponse.from_product(product), "movement": movement}


@router.get("/verify", response_model=LedgerReport)
def verify_product_ledger(
    product_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("stock", "view"))
):
    """Replay a product's movements and compare with its current stock"""
    return ledger.verify_ledger(db, product_id)
