"""Checkout pricing shared by the preview and the order-creation path.

``price_cart`` is the only code that turns a cart into money.  The
preview handler calls it read-only; ``CreateOrderHandler`` calls it
inside the transaction that commits the order.  Keeping one function
means the two can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.dto import CheckoutPreviewDTO, preview_to_dto
from storefront.domain.exceptions import InsufficientStockError, ProductUnavailableError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.product import Product
from storefront.domain.service.pricing import PriceBreakdown, PriceLine, PricingEngine
from storefront.domain.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class PricedCart:
    lines: list[tuple[Product, PriceLine]]
    breakdown: PriceBreakdown

    @property
    def is_empty(self) -> bool:
        return not self.lines


def price_cart(
    uow: UnitOfWork,
    cart_items: list[CartItem],
    engine: PricingEngine,
) -> PricedCart:
    """Re-fetch every product and price the cart from current catalog state.

    Raises ProductUnavailableError or InsufficientStockError for the first
    line that cannot be fulfilled; no line is ever silently dropped.
    """
    lines: list[tuple[Product, PriceLine]] = []
    for item in cart_items:
        product = uow.products.get_by_id(item.product_id)
        if product is None:
            raise ProductUnavailableError(
                f"Product '{item.product_id}' is no longer available"
            )
        if product.stock < item.quantity:
            raise InsufficientStockError(
                f"Insufficient stock for {product.name}. "
                f"Only {product.stock} available."
            )
        lines.append((product, PriceLine.for_product(product, item.quantity)))

    breakdown = engine.price(line for _, line in lines)
    return PricedCart(lines=lines, breakdown=breakdown)


class PreviewCheckoutHandler:
    """Read-only: what would this cart cost if ordered now?"""

    def __init__(self, uow: UnitOfWork, pricing: PricingEngine) -> None:
        self._uow = uow
        self._pricing = pricing

    def handle(self, user_id: str) -> CheckoutPreviewDTO:
        with self._uow as uow:
            priced = price_cart(uow, uow.carts.list_for_user(user_id), self._pricing)
        return preview_to_dto(priced.lines, priced.breakdown)
