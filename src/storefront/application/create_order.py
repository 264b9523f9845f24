"""Application service: Create Order use case.

Turns the user's cart into an order in a single unit of work:

1. Load the cart (EmptyCart if there is nothing in it).
2. Re-fetch and price every line from the live catalog (``price_cart``).
3. Decrement stock per line with a conditional update.  The stock check
   in step 2 is advisory; this decrement is the real guard, and a failure
   here rolls the whole order back.
4. Insert the order with frozen prices and clear the cart.

The server never trusts a client-computed total.
"""

from __future__ import annotations

import logging

from storefront.application.checkout import price_cart
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EmptyCartError, InsufficientStockError
from storefront.domain.model.order import Order, OrderItem, check_payment_method
from storefront.domain.model.value_objects import ShippingAddress
from storefront.domain.service.pricing import PricingEngine
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork, pricing: PricingEngine) -> None:
        self._uow = uow
        self._pricing = pricing

    def handle(
        self,
        user_id: str,
        shipping_address: ShippingAddress,
        payment_method: str,
    ) -> OrderDTO:
        """Create an order from the user's cart.

        Not idempotent: every call with a non-empty cart creates a new order.
        """
        payment_method = check_payment_method(payment_method)

        with self._uow as uow:
            cart_items = uow.carts.list_for_user(user_id)
            if not cart_items:
                raise EmptyCartError("Cart is empty")

            priced = price_cart(uow, cart_items, self._pricing)

            # Fixed lock order across concurrent orders.
            for product, line in sorted(priced.lines, key=lambda pl: pl[0].id):
                if not uow.products.decrement_stock(product.id, line.quantity.value):
                    logger.warning(
                        "stock race lost for %s (user %s, wanted %d)",
                        product.id, user_id, line.quantity.value,
                    )
                    raise InsufficientStockError(
                        f"Insufficient stock for {product.name}"
                    )

            breakdown = priced.breakdown
            order = Order.create(
                user_id=user_id,
                items=[
                    OrderItem(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=line.quantity,
                        unit_price=line.effective_unit_price,  # <-- price snapshot
                    )
                    for product, line in priced.lines
                ],
                subtotal=breakdown.subtotal,
                shipping=breakdown.shipping,
                tax=breakdown.tax,
                total=breakdown.total,
                shipping_address=shipping_address,
                payment_method=payment_method,
            )
            uow.orders.add(order)
            uow.carts.clear(user_id)

        logger.info(
            "order #%s created for %s: %d lines, total %s",
            order.id, user_id, len(order.items), order.total,
        )
        return order_to_dto(order)
