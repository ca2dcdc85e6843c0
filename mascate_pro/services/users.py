"""
User accounts: login bookkeeping, CRUD and passwords.
"""
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from mascate_pro.core.database import utcnow
from mascate_pro.core.exceptions import (
    AuthenticationError, DuplicateNameError, NotFoundError, ValidationError,
)
from mascate_pro.core.logging_config import get_logger
from mascate_pro.core.permissions import Actor, Role, ensure_not_self, role_level
from mascate_pro.core.security import (
    generate_temporary_password, get_password_hash, verify_password,
)
from mascate_pro.models.user import User
from mascate_pro.services import activity_logger

logger = get_logger(__name__)

UPDATABLE_USER_FIELDS = ("email", "display_name", "avatar_id", "role", "active")


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _email_taken(db: Session, email: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(User.id).filter(func.lower(User.email) == email)
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def authenticate(
    db: Session,
    email: str,
    password: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> User:
    """
    Check credentials and record the attempt.

    Unknown email, wrong password and inactive account all fail the same way
    so the response does not reveal which accounts exist.
    """
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = db.query(User).filter(func.lower(User.email) == email).first()
    if not user or not user.active or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email} from {ip_address}")
        activity_logger.record(
            db, user.id if user else None, "LOGIN_FAILED",
            f"Tentativa de login falhou para {email}", ip_address, user_agent,
        )
        raise AuthenticationError()

    user.last_login = utcnow()
    db.commit()
    activity_logger.record(
        db, user.id, "LOGIN_SUCCESS", f"Login realizado por {user.email}",
        ip_address, user_agent,
    )
    db.refresh(user)
    logger.info(f"User {user.id} logged in")
    return user


def list_users(db: Session, include_inactive: bool = True) -> List[User]:
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.active == True)  # noqa: E712
    return query.order_by(User.created_at.asc()).all()


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, data: dict, actor: Actor) -> User:
    email = _normalize_email(data.get("email"))
    password = data.get("password")
    display_name = (data.get("display_name") or "").strip()
    role = data.get("role") or Role.USER.value

    if not email or not password or not display_name:
        raise ValidationError("Email, password and display_name are required")
    if role_level(role) == 0:
        raise ValidationError(f"Unknown role '{role}'")
    if _email_taken(db, email):
        raise DuplicateNameError(f"Email {email} is already registered")

    try:
        user = User(
            email=email,
            display_name=display_name,
            avatar_id=data.get("avatar_id"),
            role=role,
            active=True,
            password_hash=get_password_hash(password),
        )
        db.add(user)
        activity_logger.add_entry(
            db, actor.id, "USER_CREATED", f"Usuário {email} criado com papel {role}",
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"User {user.id} ({role}) created by {actor.id}")
    return user


def update_user(db: Session, user_id: str, changes: dict, actor: Actor) -> User:
    user = get_user(db, user_id)
    fields = {key: changes[key] for key in UPDATABLE_USER_FIELDS if key in changes}

    if "email" in fields:
        fields["email"] = _normalize_email(fields["email"])
        if not fields["email"]:
            raise ValidationError("Email cannot be empty")
        if _email_taken(db, fields["email"], exclude_id=user.id):
            raise DuplicateNameError(f"Email {fields['email']} is already registered")
    if "role" in fields and role_level(fields["role"]) == 0:
        raise ValidationError(f"Unknown role '{fields['role']}'")

    if fields.get("active") is False:
        ensure_not_self(actor.id, user.id, "deactivate")
    if "role" in fields and role_level(fields["role"]) < role_level(user.role):
        ensure_not_self(actor.id, user.id, "demote")

    try:
        for key, value in fields.items():
            setattr(user, key, value)
        activity_logger.add_entry(
            db, actor.id, "USER_UPDATED",
            f'Usuário {user.email} atualizado ({", ".join(sorted(fields)) or "sem alterações"})',
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    return user


def deactivate_user(db: Session, user_id: str, actor: Actor) -> User:
    """Soft delete: the account stays so its history keeps a valid author."""
    user = get_user(db, user_id)
    ensure_not_self(actor.id, user.id, "delete")

    try:
        user.active = False
        activity_logger.add_entry(
            db, actor.id, "USER_DELETED", f"Usuário {user.email} desativado",
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"User {user.id} deactivated by {actor.id}")
    return user


def change_password(
    db: Session, user: User, current_password: str, new_password: str, actor: Actor
) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    if current_password == new_password:
        raise ValidationError("New password must differ from the current one")

    try:
        user.password_hash = get_password_hash(new_password)
        activity_logger.add_entry(
            db, actor.id, "PASSWORD_CHANGED", f"Senha alterada por {user.email}",
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise


def reset_password(db: Session, user_id: str, actor: Actor) -> Tuple[User, str]:
    """Replace the password with a random temporary one and return it once."""
    user = get_user(db, user_id)
    temporary = generate_temporary_password()

    try:
        user.password_hash = get_password_hash(temporary)
        activity_logger.add_entry(
            db, actor.id, "PASSWORD_RESET", f"Senha de {user.email} redefinida",
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"Password of user {user.id} reset by {actor.id}")
    return user, temporary
