"""Checkout router - POST /api/cart/checkout"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Header, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import CART_SESSION_COOKIE
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ..cart.router import apply_session_cookie, get_cart_service
from ..cart.service import CartService
from .schemas import CheckoutRequest, CheckoutResponse
from .service import CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Checkout"])

checkout_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="checkout")


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    """Dependency injection for CheckoutService"""
    return CheckoutService(db)


@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    response: Response,
    data: Optional[CheckoutRequest] = None,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    cart_session: Optional[str] = Cookie(None, alias=CART_SESSION_COOKIE),
    current_user: User = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
    service: CheckoutService = Depends(get_checkout_service),
    _: None = Depends(checkout_rate_limit),
):
    """
    Convert every cart item into a confirmed booking with a payment.

    Send an idempotency key (body `idempotencyKey` or `Idempotency-Key` header)
    to make retries safe: a repeated key returns the original confirmations.
    """
    data = data or CheckoutRequest()
    key = data.idempotencyKey or (idempotency_key.strip() if idempotency_key else None) or None

    resolved = cart_service.resolve_cart(current_user, cart_session, create=False)
    apply_session_cookie(response, resolved)

    result = service.checkout(current_user, resolved.cart, data.paymentMethod, key)
    if result.replayed:
        # Original confirmations; nothing new was booked
        response.headers["Idempotent-Replayed"] = "true"
        logger.info(f"🔁 Replayed checkout for user {current_user.id} (key={key})")
    return CheckoutResponse(
        message="Checkout completed",
        confirmations=result.confirmations,
        order=result.order,
    )
