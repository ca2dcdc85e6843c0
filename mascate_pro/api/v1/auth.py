from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from mascate_pro.core.database import get_db
from mascate_pro.core.permissions import get_role_permissions
from mascate_pro.core.security import create_access_token
from mascate_pro.models.user import User
from mascate_pro.schemas.auth import LoginRequest, LoginResponse, PasswordChange, Token, UserResponse
from mascate_pro.services import users as user_service
from mascate_pro.api.v1.dependencies import actor_for, client_ip, get_current_user

router = APIRouter()


def _issue_token(user: User) -> str:
    return create_access_token(data={"sub": user.id, "role": user.role})


@router.post("", response_model=LoginResponse)
def login(credentials: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """
    Login with email and password

    Returns the user and a bearer token for the other endpoints.
    """
    user = user_service.authenticate(
        db, credentials.email, credentials.password,
        client_ip(request), request.headers.get("User-Agent"),
    )
    return {
        "success": True,
        "user": user,
        "access_token": _issue_token(user),
        "token_type": "bearer",
    }


@router.post("/token", response_model=Token)
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    OAuth2 password flow for the interactive docs
    Note: the form's 'username' field carries the email
    """
    user = user_service.authenticate(
        db, form_data.username, form_data.password,
        client_ip(request), request.headers.get("User-Agent"),
    )
    return {"access_token": _issue_token(user), "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information"""
    return current_user


@router.get("/permissions")
def get_my_permissions(current_user: User = Depends(get_current_user)):
    return {"role": current_user.role, "permissions": get_role_permissions(current_user.role)}


@router.post("/change-password")
def change_password(
    payload: PasswordChange,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user_service.change_password(
        db, current_user, payload.current_password, payload.new_password,
        actor_for(current_user, request),
    )
    return {"message": "Password changed successfully"}
