"""Cart router - FastAPI endpoints for the caller's cart"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.orm import Session

from ...auth import get_optional_user
from ...config import CART_SESSION_COOKIE, CART_SESSION_MAX_AGE_DAYS, COOKIE_SECURE
from ...database import get_db
from ...models import Cart, CartItem, User
from ..pricing.calculations import format_money, to_decimal
from .schemas import (
    AddCartItemResponse,
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartResponse,
    MessageResponse,
)
from .service import CartService, ResolvedCart

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    """Dependency injection for CartService"""
    return CartService(db)


def item_response(item: CartItem) -> CartItemResponse:
    return CartItemResponse(
        id=item.id,
        cartId=item.cart_id,
        serviceId=item.service_id,
        providerId=item.provider_id,
        serviceType=item.service_type,
        serviceName=item.service_name,
        scheduledDate=item.scheduled_date,
        scheduledTime=item.scheduled_time or "",
        duration=item.duration,
        basePrice=format_money(item.base_price),
        addOnsPrice=format_money(item.add_ons_price),
        subtotal=format_money(item.subtotal),
        tipAmount=format_money(item.tip_amount),
        serviceDetails=item.service_details,
        selectedAddOns=item.selected_add_ons or [],
        comments=item.comments,
        addedAt=item.added_at,
    )


def cart_response(cart: Cart) -> CartResponse:
    items = list(cart.items)
    return CartResponse(
        id=cart.id,
        status=cart.status,
        userId=cart.user_id,
        itemCount=len(items),
        subtotal=format_money(sum((to_decimal(i.subtotal) for i in items), to_decimal(0))),
        createdAt=cart.created_at,
        updatedAt=cart.updated_at,
        items=[item_response(i) for i in items],
    )


def apply_session_cookie(response: Response, resolved: ResolvedCart) -> None:
    if resolved.issued_session:
        response.set_cookie(
            key=CART_SESSION_COOKIE,
            value=resolved.issued_session,
            max_age=CART_SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
            httponly=True,
            secure=COOKIE_SECURE,
            samesite="lax",
            path="/",
        )
    elif resolved.clear_session:
        response.delete_cookie(key=CART_SESSION_COOKIE, path="/")


def resolve_caller_cart(
    response: Response,
    current_user: Optional[User] = Depends(get_optional_user),
    cart_session: Optional[str] = Cookie(None, alias=CART_SESSION_COOKIE),
    service: CartService = Depends(get_cart_service),
) -> Cart:
    """Dependency: the caller's active cart, created on first use"""
    resolved = service.resolve_cart(current_user, cart_session)
    apply_session_cookie(response, resolved)
    return resolved.cart


@router.get("", response_model=CartResponse)
async def get_cart(cart: Cart = Depends(resolve_caller_cart)):
    """Get the caller's cart with its items (created lazily)"""
    return cart_response(cart)


@router.delete("", response_model=MessageResponse)
async def clear_cart(
    cart: Cart = Depends(resolve_caller_cart),
    service: CartService = Depends(get_cart_service),
):
    """Remove every item from the caller's cart; the cart itself persists"""
    service.clear_cart(cart)
    return MessageResponse(message="Cart cleared")


@router.post("/items", response_model=AddCartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_cart_item(
    data: CartItemCreate,
    cart: Cart = Depends(resolve_caller_cart),
    service: CartService = Depends(get_cart_service),
):
    """Add a service to the cart (max CART_MAX_ITEMS; duplicates replace the existing line)"""
    item = service.add_item(cart, data)
    return AddCartItemResponse(item=item_response(item), cart=cart_response(cart))


@router.patch("/items/{item_id}", response_model=CartItemResponse)
async def update_cart_item(
    item_id: str,
    data: CartItemUpdate,
    cart: Cart = Depends(resolve_caller_cart),
    service: CartService = Depends(get_cart_service),
):
    """Update scheduling, pricing or details of a cart item"""
    return item_response(service.update_item(cart, item_id, data))


@router.delete("/items/{item_id}", response_model=MessageResponse)
async def remove_cart_item(
    item_id: str,
    cart: Cart = Depends(resolve_caller_cart),
    service: CartService = Depends(get_cart_service),
):
    """Remove one item from the caller's cart"""
    service.remove_item(cart, item_id)
    return MessageResponse(message="Item removed from cart")
