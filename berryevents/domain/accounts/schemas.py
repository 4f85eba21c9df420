"""Accounts domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255)
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v

    @field_validator("username")
    @classmethod
    def strip_username(cls, v):
        return v.strip()


class LoginRequest(BaseModel):
    email: str
    password: str
    rememberMe: bool = False

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    id: str
    email: str
    username: str
    firstName: str
    lastName: str
    phone: Optional[str] = None
    address: Optional[str] = None
    isProvider: bool = False
    createdAt: Optional[datetime] = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
    # Issued on registration and on login with rememberMe
    refreshToken: Optional[str] = None


class RefreshRequest(BaseModel):
    refreshToken: Optional[str] = None


class RefreshResponse(BaseModel):
    accessToken: str
