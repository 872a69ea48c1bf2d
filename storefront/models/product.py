from typing import Optional
from decimal import Decimal
from datetime import datetime
from sqlalchemy import Text
from sqlmodel import Field, SQLModel

from storefront.models.base import utc_now

class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic Info
    name: str = Field(index=True, max_length=100)
    description: Optional[str] = Field(default=None, sa_type=Text)

    # Pricing
    unit_price: Decimal = Field(max_digits=10, decimal_places=2)

    # Classification (plain ids, no FK constraints)
    category_id: Optional[int] = Field(default=None, index=True)
    supplier_id: Optional[int] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"onupdate": utc_now},
    )
