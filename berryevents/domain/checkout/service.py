"""Checkout service - turns the cart into confirmed bookings and payments"""

import logging
from typing import NamedTuple, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Cart, CheckoutRecord, User
from ...security_utils import generate_transaction_id
from ..orders.schemas import OrderResponse
from ..orders.service import build_order_view
from ..pricing.calculations import platform_fee, quantize_money
from .repository import CheckoutRepository

logger = logging.getLogger(__name__)


class CheckoutResult(NamedTuple):
    confirmations: list[dict]
    order: Optional[OrderResponse]
    replayed: bool = False


class CheckoutService:
    """
    Service layer for checkout.

    All bookings, payments and the cart transition are written in one
    transaction: either every item is converted or nothing is.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CheckoutRepository()

    def checkout(
        self,
        user: User,
        cart: Optional[Cart],
        payment_method: str = "card",
        idempotency_key: Optional[str] = None,
    ) -> CheckoutResult:
        if idempotency_key:
            record = self.repo.get_checkout_record(self.db, user.id, idempotency_key)
            if record:
                return self._replay(user, record)

        if cart is None:
            raise HTTPException(status_code=400, detail="Cart not found")
        if not cart.items:
            raise HTTPException(status_code=400, detail="Cart is empty")

        logger.info(f"📥 Checkout of cart {cart.id} ({len(cart.items)} items) for user {user.id}")

        try:
            confirmations, first = self._convert_cart(user, cart, payment_method)
            if idempotency_key:
                self.repo.create_checkout_record(
                    self.db, user.id, idempotency_key, cart.id, confirmations
                )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if idempotency_key:
                # A concurrent request with the same key won the race
                record = self.repo.get_checkout_record(self.db, user.id, idempotency_key)
                if record:
                    logger.info(f"🔁 Idempotency key already used by a concurrent checkout for user {user.id}")
                    return self._replay(user, record)
            logger.error(f"❌ Checkout of cart {cart.id} violated a constraint; rolled back", exc_info=True)
            raise
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Checkout of cart {cart.id} failed; rolled back", exc_info=True)
            raise

        booking, payment = first
        logger.info(f"✅ Checkout complete: {len(confirmations)} bookings for user {user.id}")
        return CheckoutResult(confirmations, build_order_view(booking, payment))

    def _convert_cart(self, user: User, cart: Cart, payment_method: str):
        confirmations = []
        first = None

        for item in cart.items:
            subtotal = quantize_money(item.subtotal)
            fee = platform_fee(subtotal)

            booking = self.repo.create_booking(
                self.db,
                user_id=user.id,
                provider_id=item.provider_id,
                cart_id=cart.id,
                service_id=item.service_id,
                service_type=item.service_type,
                service_name=item.service_name,
                event_date=item.scheduled_date,
                event_time=item.scheduled_time or "",
                event_duration=item.duration,
                base_price=quantize_money(item.base_price),
                add_ons_price=quantize_money(item.add_ons_price),
                total_amount=subtotal,
                tip_amount=quantize_money(item.tip_amount),
                service_details=item.service_details,
                selected_add_ons=item.selected_add_ons or [],
                special_requests=item.comments,
                status="CONFIRMED",
            )
            payment = self.repo.create_payment(
                self.db,
                booking_id=booking.id,
                user_id=user.id,
                provider_id=item.provider_id,
                amount=subtotal + fee,
                platform_commission=fee,
                provider_payout=subtotal,
                payment_method=payment_method,
                payment_status="COMPLETED",
                transaction_id=generate_transaction_id(),
            )
            confirmations.append({"bookingId": booking.id, "paymentId": payment.id})
            if first is None:
                first = (booking, payment)

        cart.status = "checked_out"
        cart.items.clear()
        self.db.flush()
        return confirmations, first

    def _replay(self, user: User, record: CheckoutRecord) -> CheckoutResult:
        logger.info(f"🔁 Replaying checkout {record.idempotency_key} for user {user.id}")
        confirmations = list(record.confirmations or [])
        order = None
        if confirmations:
            booking = self.repo.get_booking(self.db, user.id, confirmations[0]["bookingId"])
            if booking:
                order = build_order_view(booking)
        return CheckoutResult(confirmations, order, replayed=True)
