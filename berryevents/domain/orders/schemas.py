"""Orders domain schemas - customer-facing order view"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    id: str
    serviceId: Optional[str] = None
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
    providerId: Optional[str] = None


class OrderResponse(BaseModel):
    """An order as shown to the customer (one booking plus its payment)"""

    id: str
    orderNumber: str
    createdAt: datetime
    status: str
    subtotal: str
    platformFee: str
    tipAmount: str
    totalAmount: str
    paymentMethod: Optional[str] = None
    paymentStatus: Optional[str] = None
    transactionId: Optional[str] = None
    items: list[OrderItem]
