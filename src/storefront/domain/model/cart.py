"""Cart lines.

A cart is nothing more than the set of CartItems a user owns; there is no
separate cart aggregate to keep in sync.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError

MAX_QUANTITY_PER_ITEM = 10


def check_line_quantity(quantity: int) -> None:
    """Validate a quantity that is about to be stored on a cart line."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than 0")
    if quantity > MAX_QUANTITY_PER_ITEM:
        raise ValidationError(f"Maximum quantity per item is {MAX_QUANTITY_PER_ITEM}")


@dataclass
class CartItem:
    user_id: str
    product_id: str
    quantity: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
