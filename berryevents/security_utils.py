"""
Security utilities: password hashing, access and refresh tokens
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, REFRESH_TOKEN_EXPIRE_DAYS, SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# TOKENS
# ============================================================================


ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _create_token(user_id: str, token_type: str, expires_delta: timedelta) -> str:
    to_encode: dict[str, Any] = {
        "userId": user_id,
        "type": token_type,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token

    Args:
        user_id: User ID stored in the ``userId`` claim
        expires_delta: Token lifetime (default ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(user_id, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Long-lived token accepted only by /api/auth/refresh"""
    if expires_delta is None:
        expires_delta = timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    return _create_token(user_id, REFRESH_TOKEN_TYPE, expires_delta)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a signed token of either type.

    Raises:
        jose.JWTError: signature invalid, token malformed or expired
    """
    return jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])


def generate_session_token() -> str:
    """Opaque token for guest cart sessions"""
    return secrets.token_urlsafe(32)


def generate_transaction_id() -> str:
    return f"txn_{secrets.token_hex(12)}"
