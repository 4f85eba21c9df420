"""Checkout repository - writes bookings, payments and checkout records

Methods add and flush but never commit; the checkout service owns the transaction.
"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking, CheckoutRecord, Payment


class CheckoutRepository:
    """Repository for checkout database operations"""

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def create_payment(db: Session, **payment_data) -> Payment:
        payment = Payment(**payment_data)
        db.add(payment)
        db.flush()
        return payment

    @staticmethod
    def get_checkout_record(db: Session, user_id: str, idempotency_key: str) -> Optional[CheckoutRecord]:
        return (
            db.query(CheckoutRecord)
            .filter(
                CheckoutRecord.user_id == user_id,
                CheckoutRecord.idempotency_key == idempotency_key,
            )
            .first()
        )

    @staticmethod
    def create_checkout_record(
        db: Session, user_id: str, idempotency_key: str, cart_id: str, confirmations: list[dict]
    ) -> CheckoutRecord:
        record = CheckoutRecord(
            user_id=user_id,
            idempotency_key=idempotency_key,
            cart_id=cart_id,
            confirmations=confirmations,
        )
        db.add(record)
        db.flush()
        return record

    @staticmethod
    def get_booking(db: Session, user_id: str, booking_id: str) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.payment))
            .filter(Booking.id == booking_id, Booking.user_id == user_id)
            .first()
        )
