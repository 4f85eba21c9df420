"""Accounts service - registration, password login and token refresh"""

import logging
from typing import Optional

from fastapi import HTTPException
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import User
from ...security_utils import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from .repository import UserRepository
from .schemas import AuthResponse, LoginRequest, RefreshResponse, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        firstName=user.first_name,
        lastName=user.last_name,
        phone=user.phone,
        address=user.address,
        isProvider=bool(user.is_provider),
        createdAt=user.created_at,
    )


class AccountService:
    """Service layer for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: RegisterRequest) -> AuthResponse:
        logger.info(f"📥 Registration request for {data.email}")

        if self.repo.get_by_email(self.db, data.email):
            raise HTTPException(status_code=409, detail="Email already registered")
        if self.repo.get_by_username(self.db, data.username):
            raise HTTPException(status_code=409, detail="Username already taken")

        try:
            user = self.repo.create_user(
                self.db,
                email=data.email,
                username=data.username,
                hashed_password=hash_password(data.password),
                first_name=data.firstName.strip(),
                last_name=data.lastName.strip(),
                phone=data.phone,
                address=data.address,
            )
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent registration for {data.email}")
            raise HTTPException(status_code=409, detail="Email or username already registered") from e

        logger.info(f"✅ Registered user {user.id}")
        return AuthResponse(
            user=user_response(user),
            token=create_access_token(user.id),
            refreshToken=create_refresh_token(user.id),
        )

    def login(self, data: LoginRequest) -> AuthResponse:
        user = self.repo.get_by_email(self.db, data.email)
        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        logger.info(f"✅ User {user.id} logged in")
        return AuthResponse(
            user=user_response(user),
            token=create_access_token(user.id),
            refreshToken=create_refresh_token(user.id) if data.rememberMe else None,
        )

    def refresh(self, refresh_token: Optional[str]) -> RefreshResponse:
        """Exchange a refresh token for a new access token"""
        if not refresh_token:
            raise HTTPException(status_code=401, detail="Refresh token required")

        try:
            payload = decode_token(refresh_token)
        except JWTError as e:
            logger.warning(f"⚠️ Refresh token verification failed: {e}")
            raise HTTPException(status_code=403, detail="Invalid refresh token") from e

        if payload.get("type") != REFRESH_TOKEN_TYPE or not payload.get("userId"):
            logger.warning("⚠️ Non-refresh token presented to refresh")
            raise HTTPException(status_code=403, detail="Invalid refresh token")

        user = self.repo.get_by_id(self.db, payload["userId"])
        if not user:
            raise HTTPException(status_code=401, detail="User not found")

        logger.info(f"🔄 Issued new access token for user {user.id}")
        return RefreshResponse(accessToken=create_access_token(user.id))
