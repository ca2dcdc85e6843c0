import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from mascate_pro.core.config import settings
from mascate_pro.core.logging_config import get_logger

logger = get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def is_valid_bcrypt_hash(hashed_password: str) -> bool:
    """
    Bcrypt hashes start with $2b$, $2a$ or $2y$ and are exactly 60 characters long.
    """
    if not isinstance(hashed_password, str):
        return False
    return hashed_password.startswith(('$2b$', '$2a$', '$2y$')) and len(hashed_password) == 60


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a plain password against a stored hash.
    Returns False for missing or malformed hashes instead of raising.
    """
    if not hashed_password:
        logger.debug("Password verification failed: no hash stored")
        return False

    if not is_valid_bcrypt_hash(hashed_password):
        logger.warning(
            f"Password verification failed: malformed bcrypt hash "
            f"(length={len(hashed_password)})"
        )
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification error: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def generate_temporary_password() -> str:
    return secrets.token_urlsafe(9)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
