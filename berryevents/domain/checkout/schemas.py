"""Checkout domain schemas"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..orders.schemas import OrderResponse

PaymentMethod = Literal["card", "bank_transfer", "cash"]


class CheckoutRequest(BaseModel):
    paymentMethod: PaymentMethod = "card"
    idempotencyKey: Optional[str] = Field(None, max_length=255)

    @field_validator("idempotencyKey")
    @classmethod
    def blank_key_is_none(cls, v):
        if v is not None:
            v = v.strip()
        return v or None


class Confirmation(BaseModel):
    bookingId: str
    paymentId: str


class CheckoutResponse(BaseModel):
    message: str
    confirmations: list[Confirmation]
    order: Optional[OrderResponse] = None
