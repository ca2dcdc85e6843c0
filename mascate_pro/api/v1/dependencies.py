from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from mascate_pro.core.database import get_db
from mascate_pro.core.permissions import Actor, check_permission
from mascate_pro.core.security import decode_access_token
from mascate_pro.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception
    user_id: str = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None:
        raise credentials_exception
    # a deactivated account loses its sessions immediately
    if not user.active:
        raise credentials_exception

    return user


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def actor_for(user: User, request: Request) -> Actor:
    return Actor(
        id=user.id,
        role=user.role,
        ip_address=client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )


def get_actor(
    request: Request,
    current_user: User = Depends(get_current_user)
) -> Actor:
    """The authenticated caller with request origin attached"""
    return actor_for(current_user, request)


def require_permission(module: str, action: str):
    """Dependency factory for permission-based access control"""
    def permission_checker(actor: Actor = Depends(get_actor)) -> Actor:
        check_permission(actor.role, module, action)
        return actor
    return permission_checker
