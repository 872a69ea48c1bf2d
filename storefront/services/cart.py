from decimal import Decimal
from typing import Optional
from sqlmodel import Session

from storefront.models.cart import Cart, CartItem
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.schemas.cart import CartItemView, CartView, CheckoutReceipt
from storefront.core.exceptions import InvalidOperationError, ResourceNotFoundError
from storefront.core.logging import get_logger

logger = get_logger(__name__)

MAX_QUANTITY = 999


class CartService:
    """
    Per-user shopping cart.

    Every public method is one unit of work: changes are flushed as they are
    made and committed once at the end, so a failure part way leaves the
    cart as it was. Line items keep the unit price the product had when it
    was first added.
    """

    def __init__(self, session: Session):
        self.session = session
        self.repo = CartRepo(session)
        self.product_repo = ProductRepo(session)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_cart(self, user_id: int) -> CartView:
        cart = self.repo.get_or_create(user_id, with_items=True)
        view = self._build_view(cart)
        self.repo.commit()
        return view

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def add_to_cart(self, user_id: int, product_id: int, quantity: Optional[int]) -> CartView:
        logger.info(f"Adding to cart: user_id={user_id}, product_id={product_id}, quantity={quantity}")

        if quantity is None or quantity <= 0:
            logger.warning(f"Rejected quantity: quantity={quantity}")
            raise InvalidOperationError("Quantity must be greater than 0")
        if quantity > MAX_QUANTITY:
            logger.warning(f"Rejected quantity above limit: quantity={quantity}")
            raise InvalidOperationError(f"Quantity cannot exceed {MAX_QUANTITY}")

        product = self.product_repo.get(product_id)
        if not product:
            logger.error(f"Product not found: product_id={product_id}")
            raise ResourceNotFoundError(f"Product not found: ID = {product_id}")

        cart = self.repo.get_or_create(user_id)
        item = self.repo.get_item(cart.id, product_id)

        if item:
            new_quantity = item.quantity + quantity
            if new_quantity > MAX_QUANTITY:
                logger.warning(
                    f"Merged quantity above limit: product_id={product_id}, "
                    f"in_cart={item.quantity}, requested={quantity}"
                )
                raise InvalidOperationError(
                    f"Quantity cannot exceed {MAX_QUANTITY} (already {item.quantity} in cart)"
                )
            logger.info(f"Merging line: product_id={product_id}, {item.quantity} -> {new_quantity}")
            item.quantity = new_quantity
        else:
            logger.info(f"New line: product_id={product_id}, quantity={quantity}, unit_price={product.unit_price}")
            item = CartItem(
                cart_id=cart.id,
                product_id=product_id,
                quantity=quantity,
                unit_price=product.unit_price,
            )

        self.repo.save_item(item)
        return self._finish(cart)

    def update_quantity(self, user_id: int, product_id: int, quantity: Optional[int]) -> CartView:
        """Set a line's quantity; 0 removes the line."""
        logger.info(f"Updating quantity: user_id={user_id}, product_id={product_id}, quantity={quantity}")

        if quantity is None:
            logger.warning(f"Missing quantity: user_id={user_id}, product_id={product_id}")
            raise InvalidOperationError("Quantity is required")
        if quantity < 0:
            logger.warning(f"Negative quantity: quantity={quantity}")
            raise InvalidOperationError("Quantity cannot be negative")
        if quantity > MAX_QUANTITY:
            logger.warning(f"Rejected quantity above limit: quantity={quantity}")
            raise InvalidOperationError(f"Quantity cannot exceed {MAX_QUANTITY}")

        cart, item = self._require_item(user_id, product_id)

        if quantity == 0:
            logger.info(f"Quantity 0, removing line: user_id={user_id}, product_id={product_id}")
            self.repo.delete_item(item)
        else:
            item.quantity = quantity
            self.repo.save_item(item)

        return self._finish(cart)

    def remove_from_cart(self, user_id: int, product_id: int) -> CartView:
        logger.info(f"Removing from cart: user_id={user_id}, product_id={product_id}")
        cart, item = self._require_item(user_id, product_id)
        self.repo.delete_item(item)
        return self._finish(cart)

    def clear_cart(self, user_id: int) -> None:
        """Remove every line. A user without a cart is not an error."""
        cart = self.repo.get_by_user(user_id)
        if cart:
            self.repo.clear_items(cart)
            self.repo.commit()
            logger.info(f"Cart cleared: user_id={user_id}, cart_id={cart.id}")

    def checkout(self, user_id: int) -> CheckoutReceipt:
        """
        Simulated checkout: empties the cart and reports what it held.
        No payment or stock handling takes place.
        """
        # Plain lookup: a rejected checkout must not leave a new cart behind
        cart = self.repo.get_by_user(user_id, with_items=True)
        if not cart or not cart.items:
            logger.warning(f"Checkout of empty cart: user_id={user_id}")
            raise InvalidOperationError("Cart is empty")

        view = self._build_view(cart)
        self.repo.clear_items(cart)
        self.repo.commit()
        logger.info(
            f"Checkout complete: user_id={user_id}, total_items={view.total_items}, "
            f"total_price={view.total_price}"
        )
        return CheckoutReceipt(
            message="Checkout successful, thank you for your purchase!",
            total_price=view.total_price,
            total_items=view.total_items,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_item(self, user_id: int, product_id: int) -> tuple[Cart, CartItem]:
        cart = self.repo.get_by_user(user_id)
        if not cart:
            logger.error(f"Cart not found: user_id={user_id}")
            raise ResourceNotFoundError(f"Cart not found: User ID = {user_id}")

        item = self.repo.get_item(cart.id, product_id)
        if not item:
            logger.error(f"Product not in cart: user_id={user_id}, product_id={product_id}")
            raise ResourceNotFoundError(f"Product not in cart: Product ID = {product_id}")
        return cart, item

    def _finish(self, cart: Cart) -> CartView:
        # Reload the lines so the view reflects the flushed changes
        self.repo.refresh(cart)
        view = self._build_view(cart)
        self.repo.commit()
        return view

    def _build_view(self, cart: Cart) -> CartView:
        items = []
        for item in cart.items:
            # Name is looked up live, the price is the frozen one on the line
            product = self.product_repo.get(item.product_id)
            if not product:
                logger.error(f"Product in cart no longer exists: cart_id={cart.id}, product_id={item.product_id}")
                raise ResourceNotFoundError(f"Product not found: ID = {item.product_id}")
            items.append(CartItemView(
                cart_item_id=item.id,
                product_id=item.product_id,
                product_name=product.name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                subtotal=item.subtotal,
            ))

        return CartView(
            cart_id=cart.id,
            items=items,
            total_items=sum(i.quantity for i in items),
            total_price=sum((i.subtotal for i in items), Decimal("0.00")),
        )
