"""
Stock ledger: the only sanctioned way to change a product's current_stock.

Every change is one transaction that locks the product row where the
backend supports it, compare-and-sets the counter, then appends a
StockMovement with before/after snapshots and the matching activity log
entry. Validation happens before any write, and any failure rolls all
three writes back together.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from mascate_pro.core.database import utcnow
from mascate_pro.core.exceptions import (
    InsufficientStockError, InvalidQuantityError, NotFoundError,
    StaleStockError, ValidationError,
)
from mascate_pro.core.logging_config import get_logger
from mascate_pro.core.permissions import Actor
from mascate_pro.models.inventory import Product, StockMovement
from mascate_pro.services import activity_logger

logger = get_logger(__name__)

INCREASING_TYPES = frozenset({"purchase", "return"})
DECREASING_TYPES = frozenset({"sale", "loss"})
ADJUSTMENT = "adjustment"
MOVEMENT_TYPES = INCREASING_TYPES | DECREASING_TYPES | {ADJUSTMENT}

MAX_PAGE_SIZE = 1000

# Re-reads allowed when another writer moves the counter between our read and
# our write (SQLite ignores FOR UPDATE).
MAX_WRITE_ATTEMPTS = 5


def signed_quantity(movement: StockMovement) -> int:
    """Effect of a movement on the counter: +quantity or -quantity."""
    if movement.movement_type in INCREASING_TYPES:
        return movement.quantity
    if movement.movement_type in DECREASING_TYPES:
        return -movement.quantity
    # adjustments go either way; the snapshots carry the direction
    return movement.quantity if movement.new_stock >= movement.previous_stock else -movement.quantity


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _lock_active_product(db: Session, product_id: str) -> Product:
    product = (
        db.query(Product)
        .filter(Product.id == product_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not product or not product.active:
        raise NotFoundError("Product not found")
    return product


def _write_counter(db: Session, product_id: str, previous: int, target: int) -> bool:
    """Compare-and-set the counter. False means another writer changed it first."""
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.current_stock == previous)
        .values(current_stock=target, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _compute_new_stock(
    product: Product,
    movement_type: str,
    quantity: Optional[int],
    new_stock: Optional[int],
) -> Tuple[int, int]:
    """Return (quantity, new_stock) for the movement, or raise before any write."""
    current = product.current_stock

    if movement_type == ADJUSTMENT:
        if new_stock is None:
            raise ValidationError("Adjustments require the counted new_stock")
        if isinstance(new_stock, bool) or not isinstance(new_stock, int) or new_stock < 0:
            raise InvalidQuantityError("new_stock must be a non-negative integer")
        delta = abs(new_stock - current)
        if delta == 0:
            raise InvalidQuantityError(
                f"Stock of {product.name} is already {current}; nothing to adjust"
            )
        return delta, new_stock

    if not _is_positive_int(quantity):
        raise InvalidQuantityError()

    if movement_type in INCREASING_TYPES:
        return quantity, current + quantity

    if quantity > current:
        raise InsufficientStockError(product.name, current, quantity)
    return quantity, current - quantity


def apply_movement(
    db: Session,
    product_id: str,
    movement_type: str,
    actor: Actor,
    quantity: Optional[int] = None,
    unit_price: Optional[float] = None,
    notes: Optional[str] = None,
    new_stock: Optional[int] = None,
    expected_stock: Optional[int] = None,
) -> Tuple[Product, StockMovement]:
    """
    Record one stock movement and update the product counter atomically.

    Args:
        movement_type: sale, purchase, return, loss or adjustment
        quantity: positive magnitude for every type except adjustment
        new_stock: target count for an adjustment (physical stock take)
        expected_stock: if given, the counter the caller believes is current;
            a mismatch means someone else moved the stock first

    Returns:
        (product, movement) after commit

    Raises:
        NotFoundError, ValidationError, InvalidQuantityError,
        InsufficientStockError, StaleStockError
    """
    if movement_type not in MOVEMENT_TYPES:
        raise ValidationError(
            f"Invalid movement_type '{movement_type}'; expected one of {sorted(MOVEMENT_TYPES)}"
        )
    if unit_price is not None and (isinstance(unit_price, bool) or unit_price <= 0):
        raise ValidationError("unit_price must be a positive number")

    for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
        try:
            product = _lock_active_product(db, product_id)
            previous = product.current_stock

            if expected_stock is not None and expected_stock != previous:
                raise StaleStockError(expected_stock, previous)

            moved, target = _compute_new_stock(product, movement_type, quantity, new_stock)

            if not _write_counter(db, product.id, previous, target):
                db.rollback()
                logger.warning(
                    f"Stock of product {product_id} changed during {movement_type}, "
                    f"retrying ({attempt}/{MAX_WRITE_ATTEMPTS})"
                )
                continue

            movement = StockMovement(
                product_id=product.id,
                movement_type=movement_type,
                quantity=moved,
                previous_stock=previous,
                new_stock=target,
                unit_price=unit_price,
                total_value=round(moved * unit_price, 2) if unit_price is not None else None,
                notes=notes,
                created_by=actor.id,
            )
            db.add(movement)

            activity_logger.add_entry(
                db, actor.id, f"STOCK_{movement_type.upper()}",
                f'Estoque do produto "{product.name}" alterado de {previous} para {target}',
                actor.ip_address, actor.user_agent,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        break
    else:
        current = db.query(Product.current_stock).filter(Product.id == product_id).scalar()
        raise StaleStockError(previous, current)

    db.refresh(product)
    db.refresh(movement)
    logger.info(
        f"{movement_type} of {moved} on product {product.id}: {previous} -> {target}"
    )
    return product, movement


def list_movements(
    db: Session,
    product_id: Optional[str] = None,
    movement_type: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[StockMovement]:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    query = db.query(StockMovement)
    if product_id:
        query = query.filter(StockMovement.product_id == product_id)
    if movement_type:
        query = query.filter(StockMovement.movement_type == movement_type)
    if date_from:
        query = query.filter(StockMovement.created_at >= date_from)
    if date_to:
        query = query.filter(StockMovement.created_at <= date_to)
    return (
        query.order_by(StockMovement.created_at.desc())
        .offset(max(0, offset))
        .limit(limit)
        .all()
    )


def verify_ledger(db: Session, product_id: str) -> dict:
    """
    Replay a product's movements in commit order and compare with the counter.

    ``broken_links`` counts movements whose previous_stock does not match the
    new_stock of the movement before it.
    """
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")

    movements = (
        db.query(StockMovement)
        .filter(StockMovement.product_id == product_id)
        .order_by(StockMovement.created_at.asc())
        .all()
    )

    running = 0
    broken = 0
    for movement in movements:
        if movement.previous_stock != running:
            broken += 1
        running += signed_quantity(movement)

    return {
        "product_id": product.id,
        "current_stock": product.current_stock,
        "ledger_stock": running,
        "movement_count": len(movements),
        "consistent": running == product.current_stock and broken == 0,
        "broken_links": broken,
    }


def movements_today(db: Session) -> int:
    now = utcnow()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return (
        db.query(func.count(StockMovement.id))
        .filter(StockMovement.created_at >= start)
        .scalar()
    )
