from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from storefront.models.cart import Cart, CartItem
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    """
    Persistence for carts and their line items.

    Methods only flush; the calling service owns the transaction and commits
    once per operation.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: int, with_items: bool = False) -> Optional[Cart]:
        query = select(Cart).where(Cart.user_id == user_id)
        if with_items:
            query = query.options(selectinload(Cart.items))
        return self.session.exec(query).first()

    def get_or_create(self, user_id: int, with_items: bool = False) -> Cart:
        """
        Fetch the user's cart, inserting it on first access.

        The insert runs in a savepoint. If a concurrent request created the
        cart first, the UNIQUE(user_id) violation rolls back the savepoint
        only and the existing row is fetched instead.
        """
        cart = self.get_by_user(user_id, with_items=with_items)
        if cart:
            return cart

        try:
            with self.session.begin_nested():
                cart = Cart(user_id=user_id)
                self.session.add(cart)
            logger.info(f"Created cart {cart.id} for user {user_id}")
            return cart
        except IntegrityError:
            logger.info(f"Cart for user {user_id} created concurrently, fetching it")
            cart = self.get_by_user(user_id, with_items=with_items)
            if cart is None:
                raise
            return cart

    def get_item(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        return self.session.exec(
            select(CartItem).where(
                CartItem.cart_id == cart_id,
                CartItem.product_id == product_id,
            )
        ).first()

    def save_item(self, item: CartItem) -> CartItem:
        self.session.add(item)
        self.session.flush()
        return item

    def delete_item(self, item: CartItem) -> None:
        self.session.delete(item)
        self.session.flush()

    def clear_items(self, cart: Cart) -> None:
        # delete-orphan cascade removes the detached lines
        cart.items.clear()
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def refresh(self, cart: Cart) -> None:
        # Lines are added by cart_id, not through the collection, so reload it
        self.session.expire(cart, ["items"])
        self.session.refresh(cart)
