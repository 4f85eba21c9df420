"""Cart domain schemas - Pydantic models for validation"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 12


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _clamp_duration(value: Optional[int]) -> Optional[int]:
    if value is None:
        return value
    return max(MIN_DURATION_HOURS, min(MAX_DURATION_HOURS, value))


class CartItemCreate(BaseModel):
    """Schema for adding a service to the cart"""

    serviceId: Optional[str] = None
    providerId: Optional[str] = None
    serviceType: Optional[str] = None
    serviceName: str = "Service"
    scheduledDate: datetime
    scheduledTime: str = ""
    duration: int = 2
    basePrice: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    addOnsPrice: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    subtotal: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    tipAmount: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    serviceDetails: Optional[dict[str, Any]] = None
    selectedAddOns: list[Any] = Field(default_factory=list)
    comments: Optional[str] = Field(None, max_length=2000)

    @field_validator("scheduledDate")
    @classmethod
    def normalize_date(cls, v):
        return _naive_utc(v)

    @field_validator("duration")
    @classmethod
    def clamp_duration(cls, v):
        return _clamp_duration(v)

    @model_validator(mode="after")
    def fill_defaults(self):
        if not self.serviceType:
            self.serviceType = self.serviceId or "service"
        if self.subtotal is None:
            self.subtotal = self.basePrice
        return self


class CartItemUpdate(BaseModel):
    """Schema for updating an item already in the cart"""

    providerId: Optional[str] = None
    scheduledDate: Optional[datetime] = None
    scheduledTime: Optional[str] = None
    duration: Optional[int] = None
    basePrice: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    addOnsPrice: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    subtotal: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    tipAmount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    serviceDetails: Optional[dict[str, Any]] = None
    selectedAddOns: Optional[list[Any]] = None
    comments: Optional[str] = Field(None, max_length=2000)

    @field_validator("scheduledDate")
    @classmethod
    def normalize_date(cls, v):
        return _naive_utc(v)

    @field_validator("duration")
    @classmethod
    def clamp_duration(cls, v):
        return _clamp_duration(v)


class CartItemResponse(BaseModel):
    id: str
    cartId: str
    serviceId: Optional[str]
    providerId: Optional[str]
    serviceType: str
    serviceName: str
    scheduledDate: datetime
    scheduledTime: str
    duration: int
    basePrice: str
    addOnsPrice: str
    subtotal: str
    tipAmount: str
    serviceDetails: Optional[dict[str, Any]] = None
    selectedAddOns: list[Any] = Field(default_factory=list)
    comments: Optional[str] = None
    addedAt: datetime


class CartResponse(BaseModel):
    id: str
    status: str
    userId: Optional[str] = None
    itemCount: int
    subtotal: str
    createdAt: datetime
    updatedAt: datetime
    items: list[CartItemResponse]


class AddCartItemResponse(BaseModel):
    item: CartItemResponse
    cart: CartResponse


class MessageResponse(BaseModel):
    message: str
