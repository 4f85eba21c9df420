"""Pricing domain schemas - Pydantic models for multi-service price summaries"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ServicePricing(BaseModel):
    basePrice: float = Field(ge=0, allow_inf_nan=False)
    addOnsPrice: float = Field(0, ge=0, allow_inf_nan=False)
    materialsDiscount: float = Field(0, ge=0, allow_inf_nan=False)
    recurringDiscount: float = Field(0, ge=0, allow_inf_nan=False)
    timeDiscount: float = Field(0, ge=0, allow_inf_nan=False)
    totalPrice: float = Field(ge=0, allow_inf_nan=False)


class ServiceDraft(BaseModel):
    """A service the customer is still configuring"""

    serviceId: str
    serviceName: str
    pricing: ServicePricing
    selectedProvider: Optional[dict[str, Any]] = None
    preferredDate: Optional[str] = None
    timePreference: Optional[str] = None
    selectedAddOns: list[Any] = Field(default_factory=list)


class PaymentLineItem(BaseModel):
    serviceId: str
    serviceName: str
    basePrice: float
    addOns: float
    discounts: float
    total: float


class AggregatedPayment(BaseModel):
    services: list[ServiceDraft]
    subtotal: float
    totalAddOns: float
    totalDiscounts: float
    grandTotal: float
    commission: int  # whole currency units
    lineItems: list[PaymentLineItem]


class AggregateRequest(BaseModel):
    drafts: list[ServiceDraft] = Field(default_factory=list)
    currentService: Optional[ServiceDraft] = None
    strict: bool = False
