"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.  Prices and
totals are frozen when the order is created; afterwards only the status
moves, and only along the edges of ``ALLOWED_TRANSITIONS``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import InvalidTransitionError, ValidationError
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        try:
            return OrderStatus(raw.strip().upper())
        except (AttributeError, ValueError) as exc:
            names = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Invalid status '{raw}'. Must be one of: {names}"
            ) from exc


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at order-creation time.

    ``unit_price`` is the effective (post-discount) price, kept at full
    precision so ``line_total`` sums back to the order subtotal.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50
MAX_PAYMENT_METHOD_LENGTH = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    items: list[OrderItem]
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money
    shipping_address: ShippingAddress
    payment_method: str
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderItem],
        subtotal: Money,
        shipping: Money,
        tax: Money,
        total: Money,
        shipping_address: ShippingAddress,
        payment_method: str,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not user_id:
            raise ValidationError("An order needs an owner")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        payment_method = check_payment_method(payment_method)

        if subtotal + shipping + tax != total:
            raise ValidationError(
                f"Order total {total} does not equal subtotal + shipping + tax"
            )

        return Order(
            id=None,
            user_id=user_id,
            items=list(items),
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=total,
            shipping_address=shipping_address,
            payment_method=payment_method,
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def advance_to(self, new_status: OrderStatus) -> OrderStatus:
        """Move to *new_status*, returning the status the order left.

        Stock restoration for cancellations is the caller's job and must
        happen in the same unit of work.
        """
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(
                f"Cannot move order #{self.id} from {self.status.value} "
                f"to {new_status.value}"
            )
        previous = self.status
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)
        return previous

    # --- Computed properties --------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id


def check_payment_method(payment_method: str) -> str:
    label = (payment_method or "").strip()
    if not label:
        raise ValidationError("Payment method is required")
    if len(label) > MAX_PAYMENT_METHOD_LENGTH:
        raise ValidationError(
            f"Payment method must be at most {MAX_PAYMENT_METHOD_LENGTH} characters"
        )
    return label
