"""Orders service - builds the order view from bookings and payments"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Booking, Payment
from ...shared.validators import validate_uuid
from ..pricing.calculations import format_money, order_number, platform_fee, quantize_money
from .repository import OrderRepository
from .schemas import OrderItem, OrderResponse

logger = logging.getLogger(__name__)


def build_order_view(booking: Booking, payment: Optional[Payment] = None) -> OrderResponse:
    """
    Order view of a booking.

    The fee is the commission stored on the payment at checkout. Bookings
    without a payment fall back to the fee the checkout would have charged.
    """
    if payment is None:
        payment = booking.payment

    subtotal = quantize_money(booking.total_amount)
    if payment is not None:
        fee = quantize_money(payment.platform_commission)
    else:
        fee = platform_fee(subtotal)

    item = OrderItem(
        id=booking.id,
        serviceId=booking.service_id,
        serviceType=booking.service_type,
        serviceName=booking.service_name,
        scheduledDate=booking.event_date,
        scheduledTime=booking.event_time or "",
        duration=booking.event_duration,
        basePrice=format_money(booking.base_price),
        addOnsPrice=format_money(booking.add_ons_price),
        subtotal=format_money(subtotal),
        tipAmount=format_money(booking.tip_amount),
        serviceDetails=booking.service_details,
        selectedAddOns=booking.selected_add_ons or [],
        comments=booking.special_requests,
        providerId=booking.provider_id,
    )

    return OrderResponse(
        id=booking.id,
        orderNumber=order_number(booking.id, booking.created_at),
        createdAt=booking.created_at,
        status=booking.status,
        subtotal=format_money(subtotal),
        platformFee=format_money(fee),
        tipAmount=format_money(booking.tip_amount),
        totalAmount=format_money(subtotal + fee),
        paymentMethod=payment.payment_method if payment else None,
        paymentStatus=payment.payment_status if payment else None,
        transactionId=payment.transaction_id if payment else None,
        items=[item],
    )


class OrderService:
    """Service layer for the orders read model"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepository()

    def list_orders(self, user_id: str) -> list[OrderResponse]:
        bookings = self.repo.get_user_bookings(self.db, user_id)
        logger.info(f"📋 Found {len(bookings)} orders for user {user_id}")
        return [build_order_view(b) for b in bookings]

    def get_order(self, user_id: str, order_id: str) -> OrderResponse:
        order_id = (order_id or "").strip()
        if not order_id:
            raise HTTPException(status_code=400, detail="orderId required")

        # Ids are UUIDs; anything else cannot exist
        booking = None
        if validate_uuid(order_id):
            booking = self.repo.get_user_booking(self.db, user_id, order_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Order not found")
        return build_order_view(booking)
