from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from storefront.models.base import utc_now

class Cart(SQLModel, table=True):
    __tablename__ = "carts"

    id: Optional[int] = Field(default=None, primary_key=True)

    # One cart per user
    user_id: int = Field(unique=True, index=True)

    items: List["CartItem"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "CartItem.id"},
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"onupdate": utc_now},
    )

class CartItem(SQLModel, table=True):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    # References
    cart_id: int = Field(foreign_key="carts.id", ondelete="CASCADE", index=True)
    product_id: int = Field(index=True)

    # Cart Details
    quantity: int = Field(default=1, ge=1, le=999)
    # Price at the time the product was added; never re-read from the catalog
    unit_price: Decimal = Field(max_digits=10, decimal_places=2)

    cart: Optional[Cart] = Relationship(back_populates="items")

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"onupdate": utc_now},
    )

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity
