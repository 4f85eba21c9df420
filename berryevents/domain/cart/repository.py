"""Cart repository - Database operations for carts and cart items

Methods add and flush but never commit; the service owns the transaction.
"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Cart, CartItem, ServiceProvider, utcnow


class CartRepository:
    """Repository for cart database operations"""

    @staticmethod
    def get_active_cart_for_user(db: Session, user_id: str) -> Optional[Cart]:
        """Oldest active cart owned by a user"""
        return (
            db.query(Cart)
            .options(selectinload(Cart.items))
            .filter(Cart.user_id == user_id, Cart.status == "active")
            .order_by(Cart.created_at.asc())
            .first()
        )

    @staticmethod
    def get_active_cart_for_session(db: Session, session_token: str) -> Optional[Cart]:
        """Active guest cart for a session token"""
        return (
            db.query(Cart)
            .options(selectinload(Cart.items))
            .filter(
                Cart.session_token == session_token,
                Cart.user_id.is_(None),
                Cart.status == "active",
            )
            .order_by(Cart.created_at.asc())
            .first()
        )

    @staticmethod
    def create_cart(
        db: Session, user_id: Optional[str] = None, session_token: Optional[str] = None
    ) -> Cart:
        cart = Cart(user_id=user_id, session_token=session_token, status="active")
        db.add(cart)
        db.flush()
        return cart

    @staticmethod
    def get_item(db: Session, cart: Cart, item_id: str) -> Optional[CartItem]:
        """An item, only if it belongs to the given cart"""
        return (
            db.query(CartItem)
            .filter(CartItem.id == item_id, CartItem.cart_id == cart.id)
            .first()
        )

    @staticmethod
    def provider_exists(db: Session, provider_id: str) -> bool:
        return db.query(ServiceProvider.id).filter(ServiceProvider.id == provider_id).first() is not None

    @staticmethod
    def add_item(db: Session, cart: Cart, **item_data) -> CartItem:
        item = CartItem(**item_data)
        cart.items.append(item)
        CartRepository.touch(cart)
        db.flush()
        return item

    @staticmethod
    def update_item(db: Session, cart: Cart, item: CartItem, **updates) -> CartItem:
        """Apply updates to an item; None values are skipped"""
        for key, value in updates.items():
            if value is not None and hasattr(item, key):
                setattr(item, key, value)
        CartRepository.touch(cart)
        db.flush()
        return item

    @staticmethod
    def remove_item(db: Session, cart: Cart, item: CartItem) -> None:
        cart.items.remove(item)
        CartRepository.touch(cart)
        db.flush()

    @staticmethod
    def clear_items(db: Session, cart: Cart) -> int:
        """Remove every item; returns how many were removed"""
        count = len(cart.items)
        cart.items.clear()
        CartRepository.touch(cart)
        db.flush()
        return count

    @staticmethod
    def move_item(db: Session, source: Cart, target: Cart, item: CartItem) -> None:
        # Appending re-parents the item and drops it from source.items via the backref
        target.items.append(item)
        CartRepository.touch(source)
        CartRepository.touch(target)
        db.flush()

    @staticmethod
    def touch(cart: Cart) -> None:
        """Mark the cart row dirty so its version is checked and bumped on flush"""
        cart.updated_at = utcnow()
