"""
Product catalog and categories.

The catalog stores ``current_stock`` but never does stock arithmetic; that is
the ledger's job. The only stock write here is the opening balance of a new
product, recorded as an adjustment movement so the ledger stays complete.
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from mascate_pro.core.database import utcnow
from mascate_pro.core.exceptions import (
    CategoryInUseError, DuplicateNameError, NotFoundError, ValidationError,
)
from mascate_pro.core.logging_config import get_logger
from mascate_pro.core.permissions import Actor
from mascate_pro.models.inventory import Category, Product, StockMovement
from mascate_pro.services import activity_logger

logger = get_logger(__name__)

UPDATABLE_PRODUCT_FIELDS = (
    "name", "category", "unit", "packaging",
    "purchase_price", "sale_price", "minimum_stock", "active",
)
UPDATABLE_CATEGORY_FIELDS = ("name", "description", "icon", "color", "active")


def _required_text(data: dict, field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Field '{field}' is required")
    return value.strip()


def _positive_price(value, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValidationError(f"Field '{field}' must be a positive number")
    return float(value)


def _stock_count(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"Field '{field}' must be a non-negative integer")
    return value


def _product_name_taken(db: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(Product.id).filter(
        func.lower(Product.name) == name.lower(),
        Product.active == True,  # noqa: E712
    )
    if exclude_id:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


# Products

def get_product(db: Session, product_id: str) -> Product:
    """Fetch a product by id, active or not."""
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def list_active_products(
    db: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    low_stock: bool = False,
) -> List[Product]:
    query = db.query(Product).filter(Product.active == True)  # noqa: E712
    if category:
        query = query.filter(Product.category.ilike(f"%{category}%"))
    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))
    if low_stock:
        query = query.filter(Product.current_stock <= Product.minimum_stock)
    return query.order_by(Product.name.asc()).all()


def get_low_stock(db: Session) -> List[Product]:
    """Active products at or below their minimum stock, read fresh every call."""
    return list_active_products(db, low_stock=True)


def create_product(db: Session, data: dict, actor: Actor) -> Product:
    name = _required_text(data, "name")
    category = _required_text(data, "category")
    unit = _required_text(data, "unit")
    purchase_price = _positive_price(data.get("purchase_price"), "purchase_price")
    sale_price = _positive_price(data.get("sale_price"), "sale_price")
    current_stock = _stock_count(data.get("current_stock") or 0, "current_stock")
    minimum_stock = _stock_count(data.get("minimum_stock") or 0, "minimum_stock")

    if _product_name_taken(db, name):
        raise DuplicateNameError(f'A product named "{name}" already exists')

    try:
        product = Product(
            name=name,
            category=category,
            unit=unit,
            packaging=data.get("packaging"),
            purchase_price=purchase_price,
            sale_price=sale_price,
            current_stock=current_stock,
            minimum_stock=minimum_stock,
            active=True,
            created_by=actor.id,
        )
        db.add(product)
        db.flush()

        if current_stock > 0:
            db.add(StockMovement(
                product_id=product.id,
                movement_type="adjustment",
                quantity=current_stock,
                previous_stock=0,
                new_stock=current_stock,
                notes="Estoque inicial",
                created_by=actor.id,
            ))

        activity_logger.add_entry(
            db, actor.id, "PRODUCT_CREATED",
            f'Produto "{name}" criado com estoque inicial {current_stock}',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(product)
    logger.info(f"Product {product.id} ({name}) created by {actor.id}")
    return product


def update_product(db: Session, product_id: str, changes: dict, actor: Actor) -> Product:
    """Apply whitelisted field changes; current_stock is not writable here."""
    product = get_product(db, product_id)
    fields = {key: changes[key] for key in UPDATABLE_PRODUCT_FIELDS if key in changes}

    if "name" in fields:
        fields["name"] = _required_text(fields, "name")
    for key in ("category", "unit"):
        if key in fields:
            fields[key] = _required_text(fields, key)
    for key in ("purchase_price", "sale_price"):
        if key in fields:
            fields[key] = _positive_price(fields[key], key)
    if "minimum_stock" in fields:
        fields["minimum_stock"] = _stock_count(fields["minimum_stock"], "minimum_stock")
    if "active" in fields and not isinstance(fields["active"], bool):
        raise ValidationError("Field 'active' must be a boolean")

    name = fields.get("name", product.name)
    will_be_active = fields.get("active", product.active)
    if will_be_active and _product_name_taken(db, name, exclude_id=product.id):
        raise DuplicateNameError(f'A product named "{name}" already exists')

    try:
        for key, value in fields.items():
            setattr(product, key, value)
        product.updated_at = utcnow()

        activity_logger.add_entry(
            db, actor.id, "PRODUCT_UPDATED",
            f'Produto "{product.name}" atualizado ({", ".join(sorted(fields)) or "sem alterações"})',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(product)
    return product


def delete_product(db: Session, product_id: str, actor: Actor) -> str:
    """
    Remove a product from the catalog.

    A product with stock history is only deactivated so the history survives;
    a product that never moved is deleted outright.

    Returns:
        "soft" or "hard"
    """
    product = get_product(db, product_id)
    has_movements = (
        db.query(StockMovement.id).filter(StockMovement.product_id == product.id).first()
        is not None
    )

    try:
        if has_movements:
            product.active = False
            product.updated_at = utcnow()
            mode = "soft"
        else:
            db.delete(product)
            mode = "hard"

        activity_logger.add_entry(
            db, actor.id, "PRODUCT_DELETED",
            f'Produto "{product.name}" removido ({"desativado" if mode == "soft" else "excluído"})',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Product {product_id} deleted ({mode}) by {actor.id}")
    return mode


# Categories

def list_categories(db: Session, include_inactive: bool = False) -> List[Category]:
    query = db.query(Category)
    if not include_inactive:
        query = query.filter(Category.active == True)  # noqa: E712
    return query.order_by(Category.name.asc()).all()


def get_category(db: Session, category_id: str) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


def _category_name_taken(db: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(Category.id).filter(func.lower(Category.name) == name.lower())
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


def create_category(db: Session, data: dict, actor: Actor) -> Category:
    name = _required_text(data, "name")
    if _category_name_taken(db, name):
        raise DuplicateNameError(f'Category "{name}" already exists')

    try:
        category = Category(
            name=name,
            description=data.get("description"),
            icon=data.get("icon"),
            color=data.get("color"),
            active=True,
            created_by=actor.id,
        )
        db.add(category)
        activity_logger.add_entry(
            db, actor.id, "CATEGORY_CREATED", f'Categoria "{name}" criada',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(category)
    return category


def update_category(db: Session, category_id: str, changes: dict, actor: Actor) -> Category:
    category = get_category(db, category_id)
    fields = {key: changes[key] for key in UPDATABLE_CATEGORY_FIELDS if key in changes}

    if "name" in fields:
        fields["name"] = _required_text(fields, "name")
        if _category_name_taken(db, fields["name"], exclude_id=category.id):
            raise DuplicateNameError(f'Category "{fields["name"]}" already exists')

    try:
        for key, value in fields.items():
            setattr(category, key, value)
        activity_logger.add_entry(
            db, actor.id, "CATEGORY_UPDATED", f'Categoria "{category.name}" atualizada',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(category)
    return category


def delete_category(db: Session, category_id: str, actor: Actor) -> None:
    category = get_category(db, category_id)
    in_use = (
        db.query(func.count(Product.id))
        .filter(func.lower(Product.category) == category.name.lower(), Product.active == True)  # noqa: E712
        .scalar()
    )
    if in_use:
        raise CategoryInUseError(
            f'Category "{category.name}" is used by {in_use} active product(s)'
        )

    try:
        name = category.name
        db.delete(category)
        activity_logger.add_entry(
            db, actor.id, "CATEGORY_DELETED", f'Categoria "{name}" removida',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
