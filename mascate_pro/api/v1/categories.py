from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from mascate_pro.core.database import get_db
from mascate_pro.core.permissions import Actor
from mascate_pro.schemas.inventory import CategoryCreate, CategoryResponse, CategoryUpdate
from mascate_pro.services import catalog
from mascate_pro.api.v1.dependencies import require_permission

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
def get_categories(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("categories", "view"))
):
    return catalog.list_categories(db, include_inactive=include_inactive)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("categories", "create"))
):
    return catalog.create_category(db, category.model_dump(), actor)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    category: CategoryUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("categories", "edit"))
):
    return catalog.update_category(db, category_id, category.model_dump(exclude_unset=True), actor)


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("categories", "delete"))
):
    """Delete a category - refused while active products use it"""
    catalog.delete_category(db, category_id, actor)
    return {"message": "Category deleted successfully"}
