from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional, Union
from mascate_pro.core.database import get_db
from mascate_pro.core.exceptions import ValidationError
from mascate_pro.core.permissions import Actor
from mascate_pro.schemas.inventory import (
    ProductCreate, ProductDeleteResponse, ProductResponse, ProductUpdate,
)
from mascate_pro.services import catalog
from mascate_pro.api.v1.dependencies import require_permission

router = APIRouter()


def _require_id(product_id: Optional[str]) -> str:
    if not product_id:
        raise ValidationError("Product id is required")
    return product_id


@router.get("", response_model=Union[ProductResponse, List[ProductResponse]])
def get_products(
    product_id: Optional[str] = Query(None, alias="id"),
    category: Optional[str] = None,
    search: Optional[str] = None,
    low_stock: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("products", "view"))
):
    """
    List active products ordered by name, or fetch one product by id.

    A product fetched by id is returned even when it has been deactivated.
    """
    if product_id:
        return ProductResponse.from_product(catalog.get_product(db, product_id))
    products = catalog.list_active_products(db, category=category, search=search, low_stock=low_stock)
    return [ProductResponse.from_product(p) for p in products]


@router.get("/low-stock", response_model=List[ProductResponse])
def get_low_stock_products(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("products", "view"))
):
    """Products at or below their minimum stock"""
    return [ProductResponse.from_product(p) for p in catalog.get_low_stock(db)]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("products", "create"))
):
    created = catalog.create_product(db, product.model_dump(), actor)
    return ProductResponse.from_product(created)


@router.put("", response_model=ProductResponse)
def update_product(
    product: ProductUpdate,
    product_id: Optional[str] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("products", "edit"))
):
    """Update product fields - Admin only. Stock is changed through stock movements."""
    updated = catalog.update_product(
        db, _require_id(product_id), product.model_dump(exclude_unset=True), actor
    )
    return ProductResponse.from_product(updated)


@router.delete("", response_model=ProductDeleteResponse)
def delete_product(
    product_id: Optional[str] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("products", "delete"))
):
    """Delete a product - deactivated instead when it has stock history"""
    product_id = _require_id(product_id)
    mode = catalog.delete_product(db, product_id, actor)
    message = "Product deactivated" if mode == "soft" else "Product deleted"
    return {"message": message, "product_id": product_id, "mode": mode}
