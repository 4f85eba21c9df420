import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .security_utils import ACCESS_TOKEN_TYPE, decode_token

logger = logging.getLogger(__name__)

# auto_error=False so guest endpoints can run without a credential
security = HTTPBearer(auto_error=False)

UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def authenticate_token(token: str, db: Session) -> User:
    """Resolve a bearer token to a user or raise 401"""
    try:
        payload = decode_token(token)
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Expired access token presented")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please sign in again.",
            headers={**UNAUTHORIZED_HEADERS, "X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid token", headers=UNAUTHORIZED_HEADERS) from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"⚠️ Rejected {payload.get('type')!r} token used as a bearer credential")
        raise HTTPException(status_code=401, detail="Invalid token type", headers=UNAUTHORIZED_HEADERS)

    user_id = payload.get("userId")
    if not user_id:
        logger.error(f"❌ Token missing userId claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims", headers=UNAUTHORIZED_HEADERS)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Token references unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Invalid token", headers=UNAUTHORIZED_HEADERS)

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer token; the credential is required"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers=UNAUTHORIZED_HEADERS,
        )
    return authenticate_token(credentials.credentials, db)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Get current user when a bearer token is present.
    A token that is present but invalid is still rejected with 401.
    """
    if not credentials:
        return None
    return authenticate_token(credentials.credentials, db)
