"""Application service: Update Product use case."""

from __future__ import annotations

import logging

from storefront.application.add_product import parse_score
from storefront.application.dto import ProductDTO, product_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import Money
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

_UNSET = object()


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        price: str | None = None,
        stock: int | None = None,
        discount=_UNSET,
        on_sale: bool | None = None,
        is_new: bool | None = None,
        featured: bool | None = None,
        name: str | None = None,
        description: str | None = None,
        category_id: str | None = None,
        sustainability_score=_UNSET,
    ) -> ProductDTO:
        """Apply catalog edits to a product.

        This does NOT affect any existing orders — they captured a
        price snapshot at creation time.  ``discount`` and
        ``sustainability_score`` accept None to clear the value, so
        "not given" is a separate sentinel.
        """
        with self._uow as uow:
            product = uow.products.get_by_id(product_id, for_update=True)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if category_id is not None:
                if uow.categories.get_by_id(category_id) is None:
                    raise EntityNotFoundError(f"Category with ID '{category_id}' not found")
                product.category_id = category_id
            if name is not None and name.strip():
                product.name = name.strip()
            if description is not None:
                product.description = description
            if price is not None:
                product.update_price(Money.of(price))
            if stock is not None:
                product.stock = stock
            if discount is not _UNSET:
                product.discount = discount
            if on_sale is not None:
                product.on_sale = on_sale
            if is_new is not None:
                product.is_new = is_new
            if featured is not None:
                product.featured = featured
            if sustainability_score is not _UNSET:
                product.sustainability_score = parse_score(sustainability_score)

            product.validate()
            uow.products.save(product)

        logger.info("product %s updated", product_id)
        return product_to_dto(product)
