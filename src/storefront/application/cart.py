"""Application services: Cart use cases.

Each handler returns the full cart snapshot after the change so the
caller never needs a second round trip.  Quantities are validated here
and again by the store's single-statement upsert, which is the real
guard against concurrent double-adds.
"""

from __future__ import annotations

import logging

from storefront.application.dto import CartDTO, CartLineDTO, product_to_dto
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.cart import MAX_QUANTITY_PER_ITEM, check_line_quantity
from storefront.domain.model.product import Product
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def load_cart(uow: UnitOfWork, user_id: str) -> CartDTO:
    """Build the cart snapshot inside an open unit of work."""
    lines: list[CartLineDTO] = []
    for item in uow.carts.list_for_user(user_id):
        product = uow.products.get_by_id(item.product_id)
        if product is None:
            continue
        lines.append(CartLineDTO(product=product_to_dto(product), quantity=item.quantity))
    return CartDTO(items=lines)


def _require_product(uow: UnitOfWork, product_id: str) -> Product:
    product = uow.products.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
    return product


def _require_stock(product: Product, quantity: int) -> None:
    if product.stock < quantity:
        raise InsufficientStockError(
            f"Only {product.stock} of {product.name} available in stock"
        )


class ShowCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> CartDTO:
        with self._uow as uow:
            return load_cart(uow, user_id)


class AddToCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, product_id: str, quantity: int) -> CartDTO:
        """Add *quantity* units, merging with an existing line."""
        check_line_quantity(quantity)

        with self._uow as uow:
            product = _require_product(uow, product_id)
            _require_stock(product, quantity)

            new_quantity = uow.carts.add_quantity(
                user_id, product_id, quantity, MAX_QUANTITY_PER_ITEM
            )
            if new_quantity is None:
                raise ValidationError(
                    f"Maximum quantity per item is {MAX_QUANTITY_PER_ITEM}"
                )
            # The merged line must still fit in stock; raising rolls back the upsert.
            _require_stock(product, new_quantity)

            logger.info(
                "cart %s: %s now x%d", user_id, product_id, new_quantity
            )
            return load_cart(uow, user_id)


class UpdateCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, product_id: str, quantity: int) -> CartDTO:
        """Replace a line's quantity.  Zero removes the line."""
        if quantity != 0:
            check_line_quantity(quantity)

        with self._uow as uow:
            if quantity == 0:
                if not uow.carts.remove(user_id, product_id):
                    raise EntityNotFoundError("Cart item not found")
                logger.info("cart %s: %s removed", user_id, product_id)
                return load_cart(uow, user_id)

            product = _require_product(uow, product_id)
            _require_stock(product, quantity)
            if not uow.carts.set_quantity(user_id, product_id, quantity):
                raise EntityNotFoundError("Cart item not found")

            logger.info("cart %s: %s set to x%d", user_id, product_id, quantity)
            return load_cart(uow, user_id)


class RemoveCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, product_id: str) -> CartDTO:
        with self._uow as uow:
            if not uow.carts.remove(user_id, product_id):
                raise EntityNotFoundError("Cart item not found")
            logger.info("cart %s: %s removed", user_id, product_id)
            return load_cart(uow, user_id)


class ClearCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> CartDTO:
        with self._uow as uow:
            removed = uow.carts.clear(user_id)
            logger.info("cart %s cleared (%d lines)", user_id, removed)
            return load_cart(uow, user_id)
