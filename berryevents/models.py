import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp with microsecond precision (keeps ordering stable within a request)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    is_provider = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    provider_profile = relationship("ServiceProvider", back_populates="user", uselist=False)
    carts = relationship("Cart", back_populates="user")
    bookings = relationship("Booking", back_populates="user")


class ServiceProvider(Base):
    __tablename__ = "service_providers"

    id = Column(String(36), primary_key=True, default=generate_id)
    # One provider profile per user
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True, index=True)
    business_name = Column(String(255), nullable=False)
    provider_type = Column(String(20), nullable=False, default="individual")  # individual, company
    company_registration = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    experience = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    services_offered = Column(JSON, default=list, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="provider_profile")


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(36), primary_key=True, default=generate_id)
    # Exactly one of user_id / session_token identifies the owner
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    session_token = Column(String(64), nullable=True, index=True)
    status = Column(String(20), default="active", nullable=False)  # active, checked_out, merged
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="carts")
    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.added_at",
    )

    # Optimistic locking: every UPDATE checks and bumps the version
    __mapper_args__ = {"version_id_col": version}


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    cart_id = Column(String(36), ForeignKey("carts.id"), nullable=False, index=True)
    service_id = Column(String(100), nullable=True)
    provider_id = Column(String(36), ForeignKey("service_providers.id"), nullable=True)
    service_type = Column(String(100), nullable=False)
    service_name = Column(String(255), nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    scheduled_time = Column(String(20), nullable=False, default="")
    duration = Column(Integer, nullable=False, default=2)  # hours
    base_price = Column(Numeric(10, 2), nullable=False, default=0)
    add_ons_price = Column(Numeric(10, 2), nullable=False, default=0)
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tip_amount = Column(Numeric(10, 2), nullable=False, default=0)
    service_details = Column(JSON, nullable=True)
    selected_add_ons = Column(JSON, default=list, nullable=False)
    comments = Column(Text, nullable=True)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    cart = relationship("Cart", back_populates="items")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # NULL when the customer did not pick a provider (unassigned)
    provider_id = Column(String(36), ForeignKey("service_providers.id"), nullable=True)
    cart_id = Column(String(36), ForeignKey("carts.id"), nullable=True)
    service_id = Column(String(100), nullable=True)
    service_type = Column(String(100), nullable=False)
    service_name = Column(String(255), nullable=False)
    event_date = Column(DateTime, nullable=False)
    event_time = Column(String(20), nullable=False, default="")
    event_duration = Column(Integer, nullable=False, default=1)
    base_price = Column(Numeric(10, 2), nullable=False, default=0)
    add_ons_price = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)  # service subtotal, excludes fee and tip
    tip_amount = Column(Numeric(10, 2), nullable=False, default=0)
    service_details = Column(JSON, nullable=True)
    selected_add_ons = Column(JSON, default=list, nullable=False)
    special_requests = Column(Text, nullable=True)
    status = Column(String(20), default="CONFIRMED", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="bookings")
    payment = relationship("Payment", back_populates="booking", uselist=False)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_id)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, unique=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(String(36), ForeignKey("service_providers.id"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)  # charged to the customer: subtotal + commission
    platform_commission = Column(Numeric(10, 2), nullable=False)
    provider_payout = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default="card")
    payment_status = Column(String(20), nullable=False, default="COMPLETED")
    transaction_id = Column(String(64), nullable=False, unique=True)
    payment_date = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    booking = relationship("Booking", back_populates="payment")


class CheckoutRecord(Base):
    """Result of a checkout keyed by the client's idempotency key"""

    __tablename__ = "checkout_records"
    __table_args__ = (UniqueConstraint("user_id", "idempotency_key", name="uq_checkout_user_key"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    idempotency_key = Column(String(255), nullable=False)
    cart_id = Column(String(36), ForeignKey("carts.id"), nullable=False)
    confirmations = Column(JSON, nullable=False)  # [{"bookingId": ..., "paymentId": ...}]
    created_at = Column(DateTime, default=utcnow, nullable=False)
