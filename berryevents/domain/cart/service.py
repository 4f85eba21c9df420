"""Cart service - Business logic for cart operations"""

import logging
from typing import NamedTuple, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import CART_MAX_ITEMS
from ...models import Cart, CartItem, User
from ...security_utils import generate_session_token
from ...shared.validators import is_valid_session_token
from .repository import CartRepository
from .schemas import CartItemCreate, CartItemUpdate

logger = logging.getLogger(__name__)


class ResolvedCart(NamedTuple):
    """The caller's cart plus what the router must do with the session cookie"""

    cart: Optional[Cart]
    issued_session: Optional[str] = None
    clear_session: bool = False


def dedupe_key(service_type, provider_id, scheduled_date, scheduled_time) -> tuple:
    """Two items with the same key describe the same appointment"""
    return (service_type, provider_id or None, scheduled_date, scheduled_time or "")


class CartService:
    """
    Service layer for cart business logic.

    Ownership: an authenticated user always owns the cart. A guest cart found
    through the session cookie alongside a user is merged into the user's cart,
    up to CART_MAX_ITEMS.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepository()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_cart(
        self, user: Optional[User], session_token: Optional[str], create: bool = True
    ) -> ResolvedCart:
        """Find (and optionally create) the caller's active cart; commits any change"""
        token = session_token if is_valid_session_token(session_token) else None
        if session_token and not token:
            logger.debug("Ignoring malformed cart session cookie")

        if user is not None:
            return self._resolve_user_cart(user, token, create)

        if token:
            cart = self.repo.get_active_cart_for_session(self.db, token)
            if cart:
                return ResolvedCart(cart)

        if not create:
            return ResolvedCart(None)

        token = token or generate_session_token()
        cart = self.repo.create_cart(self.db, session_token=token)
        self.db.commit()
        logger.info(f"🆕 Created guest cart {cart.id}")
        return ResolvedCart(cart, issued_session=token)

    def _resolve_user_cart(self, user: User, token: Optional[str], create: bool) -> ResolvedCart:
        cart = self.repo.get_active_cart_for_user(self.db, user.id)
        guest = self.repo.get_active_cart_for_session(self.db, token) if token else None

        if cart is None and guest is not None:
            # Adopt the guest cart outright
            guest.user_id = user.id
            guest.session_token = None
            self.repo.touch(guest)
            self.db.commit()
            logger.info(f"🔄 Guest cart {guest.id} adopted by user {user.id}")
            return ResolvedCart(guest, clear_session=True)

        if cart is None:
            if not create:
                return ResolvedCart(None)
            cart = self.repo.create_cart(self.db, user_id=user.id)
            self.db.commit()
            logger.info(f"🆕 Created cart {cart.id} for user {user.id}")
            return ResolvedCart(cart)

        if guest is not None:
            fully_merged = self._merge_guest_cart(guest, cart)
            self.db.commit()
            return ResolvedCart(cart, clear_session=fully_merged)

        return ResolvedCart(cart)

    def _merge_guest_cart(self, guest: Cart, cart: Cart) -> bool:
        """Move guest items into the user's cart; True when the guest cart is emptied"""
        existing = {
            dedupe_key(i.service_type, i.provider_id, i.scheduled_date, i.scheduled_time): i
            for i in cart.items
        }
        moved = dropped = 0

        for item in list(guest.items):
            key = dedupe_key(item.service_type, item.provider_id, item.scheduled_date, item.scheduled_time)
            if key in existing:
                guest.items.remove(item)
                dropped += 1
                continue
            if len(cart.items) >= CART_MAX_ITEMS:
                break
            self.repo.move_item(self.db, guest, cart, item)
            existing[key] = item
            moved += 1

        if guest.items:
            if not (moved or dropped):
                # Nothing changed; leave both rows and their versions alone
                logger.debug(f"Cart {cart.id} is full; guest cart {guest.id} left untouched")
                return False
            self.repo.touch(guest)
            logger.warning(
                f"⚠️ Cart {cart.id} is full; {len(guest.items)} guest items left in cart {guest.id}"
            )
            return False

        guest.status = "merged"
        guest.session_token = None
        self.db.flush()
        logger.info(f"🔄 Merged guest cart {guest.id} into {cart.id} (moved={moved}, duplicates={dropped})")
        return True

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def clear_cart(self, cart: Cart) -> int:
        """Remove every item; the cart itself stays active"""
        removed = self.repo.clear_items(self.db, cart)
        self.db.commit()
        logger.info(f"🧹 Cleared {removed} items from cart {cart.id}")
        return removed

    def add_item(self, cart: Cart, data: CartItemCreate) -> CartItem:
        logger.info(f"📥 Adding {data.serviceType} to cart {cart.id}")

        if data.providerId and not self.repo.provider_exists(self.db, data.providerId):
            raise HTTPException(status_code=400, detail="Unknown provider")

        fields = {
            "service_id": data.serviceId,
            "provider_id": data.providerId,
            "service_type": data.serviceType,
            "service_name": data.serviceName,
            "scheduled_date": data.scheduledDate,
            "scheduled_time": data.scheduledTime,
            "duration": data.duration,
            "base_price": data.basePrice,
            "add_ons_price": data.addOnsPrice,
            "subtotal": data.subtotal,
            "tip_amount": data.tipAmount,
            "service_details": data.serviceDetails,
            "selected_add_ons": data.selectedAddOns,
            "comments": data.comments,
        }

        key = dedupe_key(data.serviceType, data.providerId, data.scheduledDate, data.scheduledTime)
        for item in cart.items:
            if dedupe_key(item.service_type, item.provider_id, item.scheduled_date, item.scheduled_time) == key:
                logger.info(f"🔁 Replacing duplicate item {item.id} in cart {cart.id}")
                for name, value in fields.items():
                    setattr(item, name, value)
                self.repo.touch(cart)
                self.db.commit()
                return item

        if len(cart.items) >= CART_MAX_ITEMS:
            logger.warning(f"⚠️ Cart {cart.id} reached the item limit ({CART_MAX_ITEMS})")
            raise HTTPException(
                status_code=400,
                detail=f"Cart limit reached. Maximum {CART_MAX_ITEMS} services allowed per booking.",
            )

        item = self.repo.add_item(self.db, cart, **fields)
        self.db.commit()
        return item

    def get_item(self, cart: Cart, item_id: str) -> CartItem:
        item = self.repo.get_item(self.db, cart, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Cart item not found")
        return item

    def update_item(self, cart: Cart, item_id: str, data: CartItemUpdate) -> CartItem:
        item = self.get_item(cart, item_id)

        if data.providerId and not self.repo.provider_exists(self.db, data.providerId):
            raise HTTPException(status_code=400, detail="Unknown provider")

        updates = {
            "provider_id": data.providerId,
            "scheduled_date": data.scheduledDate,
            "scheduled_time": data.scheduledTime,
            "duration": data.duration,
            "base_price": data.basePrice,
            "add_ons_price": data.addOnsPrice,
            "subtotal": data.subtotal,
            "tip_amount": data.tipAmount,
            "service_details": data.serviceDetails,
            "selected_add_ons": data.selectedAddOns,
            "comments": data.comments,
        }
        item = self.repo.update_item(self.db, cart, item, **updates)
        self.db.commit()
        return item

    def remove_item(self, cart: Cart, item_id: str) -> None:
        item = self.get_item(cart, item_id)
        self.repo.remove_item(self.db, cart, item)
        self.db.commit()
        logger.info(f"🗑️ Removed item {item_id} from cart {cart.id}")
