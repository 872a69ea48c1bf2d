from typing import Optional
from decimal import Decimal
from datetime import datetime
from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    unit_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None

class ProductUpdate(CamelModel):
    """Partial update: only fields present in the request are applied."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    unit_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None

class ProductRead(CamelModel):
    id: int
    name: str
    unit_price: Money
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
