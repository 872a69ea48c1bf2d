# Import all models to register them with SQLModel
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.cart import Cart, CartItem

__all__ = [
    "User",
    "Product",
    "Cart",
    "CartItem",
]
