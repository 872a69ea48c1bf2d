from typing import List, Optional
from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class AddToCartRequest(CamelModel):
    product_id: int
    # Range is checked by the service so every violation reports the same way
    quantity: Optional[int] = Field(default=1)

class UpdateQuantityRequest(CamelModel):
    quantity: Optional[int] = None

class CartItemView(CamelModel):
    cart_item_id: int
    product_id: int
    product_name: str
    unit_price: Money
    quantity: int
    subtotal: Money

class CartView(CamelModel):
    cart_id: int
    items: List[CartItemView]
    total_items: int
    total_price: Money

class CartMutationResponse(CamelModel):
    success: bool = True
    message: str
    cart: CartView

class CheckoutReceipt(CamelModel):
    success: bool = True
    message: str
    total_price: Money
    total_items: int

class SimpleResponse(CamelModel):
    success: bool = True
    message: str
