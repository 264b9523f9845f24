"""Request bodies accepted by the HTTP API.

Field names are camelCase on the wire and snake_case in Python.  Only
the request *shape* is checked here; business limits (quantity caps,
address lengths, rating range) stay in the domain so the CLI and HTTP
boundaries reject the same inputs with the same messages.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.domain.model.value_objects import ShippingAddress


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartItemBody(CamelModel):
    product_id: str
    quantity: int = 1


class CartQuantityBody(CamelModel):
    quantity: int


class ShippingAddressBody(CamelModel):
    full_name: str
    address: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: str | None = None

    def to_domain(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class CreateOrderBody(CamelModel):
    shipping_address: ShippingAddressBody
    payment_method: str


class OrderStatusBody(CamelModel):
    status: str


class ReviewBody(CamelModel):
    rating: int
    title: str
    comment: str


class CategoryBody(CamelModel):
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    featured: bool = False


class ProductBody(CamelModel):
    name: str
    price: Decimal
    stock: int = 0
    category_id: str | None = None
    description: str = ""
    discount: int | None = None
    on_sale: bool = False
    is_new: bool = False
    featured: bool = False
    images: list[str] = []
    sustainability_score: Decimal | None = None


class ProductPatchBody(CamelModel):
    name: str | None = None
    price: Decimal | None = None
    stock: int | None = None
    category_id: str | None = None
    description: str | None = None
    discount: int | None = None
    on_sale: bool | None = None
    is_new: bool | None = None
    featured: bool | None = None
    sustainability_score: Decimal | None = None


def to_wire(value):
    """Render DTOs as JSON-ready data with camelCase keys."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {to_camel(key): to_wire(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_wire(item) for item in value]
    return value
