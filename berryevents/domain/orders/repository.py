"""Orders repository - Database operations for bookings and their payments"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking


class OrderRepository:
    """Repository for order (booking + payment) reads"""

    @staticmethod
    def get_user_bookings(db: Session, user_id: str) -> list[Booking]:
        """All bookings for a user, newest first, payments eager-loaded"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.payment))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_user_booking(db: Session, user_id: str, booking_id: str) -> Optional[Booking]:
        """A booking by id, only if the user owns it"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.payment))
            .filter(Booking.id == booking_id, Booking.user_id == user_id)
            .first()
        )
