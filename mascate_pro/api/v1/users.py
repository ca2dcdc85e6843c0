from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from mascate_pro.core.database import get_db
from mascate_pro.core.permissions import Actor
from mascate_pro.schemas.auth import PasswordResetResponse, UserCreate, UserResponse, UserUpdate
from mascate_pro.services import users as user_service
from mascate_pro.api.v1.dependencies import require_permission

router = APIRouter()


@router.get("", response_model=List[UserResponse])
def get_users(
    include_inactive: bool = True,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("users", "view"))
):
    """Get all users - Superadmin only"""
    return user_service.list_users(db, include_inactive=include_inactive)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("users", "view"))
):
    return user_service.get_user(db, user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("users", "create"))
):
    return user_service.create_user(db, user_data.model_dump(), actor)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("users", "edit"))
):
    """
    Update a user - Superadmin only

    Nobody can deactivate or demote their own account.
    """
    return user_service.update_user(db, user_id, user_data.model_dump(exclude_unset=True), actor)


@router.delete("/{user_id}", response_model=UserResponse)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("users", "delete"))
):
    """Deactivate a user; the account is kept for its history"""
    return user_service.deactivate_user(db, user_id, actor)


@router.post("/{user_id}/reset-password", response_model=PasswordResetResponse)
def reset_user_password(
    user_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_permission("users", "reset_password"))
):
    user, temporary = user_service.reset_password(db, user_id, actor)
    return {"user_id": user.id, "email": user.email, "temporary_password": temporary}
