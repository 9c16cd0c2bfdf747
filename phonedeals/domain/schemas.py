# phonedeals/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Field names in snake_case, JSON in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# REQUESTS
# =====================================================
class CartLineIn(CamelModel):
    """Body of POST /api/cart/items. Values are checked by the cart service."""

    phone_id: Any = None
    quantity: Any = None


class QuantityIn(CamelModel):
    """Body of PATCH /api/cart/items/{phoneId}."""

    quantity: Any = None


class CheckoutIn(CamelModel):
    # street, city, state, zip, country; completeness is checked by the checkout
    address: Any = None


class WishlistIn(CamelModel):
    phone_id: int


# =====================================================
# RESPONSES
# =====================================================
class CartLineOut(CamelModel):
    phone_id: int
    title: str
    quantity: int
    price: Decimal
    average_rating: Optional[float] = None
    review_count: Optional[int] = None
    seller_id: Optional[str] = None


class CartOut(CamelModel):
    id: int = Field(serialization_alias="_id")
    user_id: str
    items: List[CartLineOut]
    total: Decimal
    version: int
    created_at: datetime
    updated_at: datetime


class AddressOut(CamelModel):
    street: str
    city: str
    state: str
    zip: str
    country: str


class OrderItemOut(CamelModel):
    phone_id: int
    title: str
    quantity: int
    price: Decimal


class OrderOut(CamelModel):
    id: int = Field(serialization_alias="_id")
    user_id: str
    items: List[OrderItemOut]
    total_amount: Decimal
    address: AddressOut
    created_at: datetime


class OrderPageOut(CamelModel):
    orders: List[OrderOut]
    total: int
    total_pages: int
    current_page: int


class ListingSummaryOut(CamelModel):
    id: int = Field(serialization_alias="_id")
    title: str
    brand: str
    price: Decimal
    stock: int
    seller_id: str
    is_disabled: bool
    average_rating: float
    review_count: int
