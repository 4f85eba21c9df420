"""Accounts router - /api/auth endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserResponse,
)
from .service import AccountService, user_response

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

rate_limit_login = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")
rate_limit_register = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")
rate_limit_refresh = create_rate_limiter(limit=30, window_seconds=300, key_prefix="refresh")


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_register),
):
    """Create an account and return it with access and refresh tokens"""
    return service.register(data)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_login),
):
    return service.login(data)


@router.get("/user", response_model=UserResponse)
async def get_user(current_user: User = Depends(get_current_user)):
    return user_response(current_user)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    data: Optional[RefreshRequest] = None,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_refresh),
):
    """Trade a refresh token for a fresh access token"""
    return service.refresh(data.refreshToken if data else None)
