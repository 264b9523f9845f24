"""Application service: Add Product use case."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal, InvalidOperation

from storefront.application.dto import ProductDTO, product_to_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def parse_score(raw: str | Decimal | float | int | None) -> Decimal | None:
    if raw is None or raw == "":
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid sustainability score: {raw!r}") from exc


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        price: str,
        stock: int,
        category_id: str | None = None,
        description: str = "",
        discount: int | None = None,
        on_sale: bool = False,
        is_new: bool = False,
        featured: bool = False,
        images: list[str] | None = None,
        sustainability_score: str | None = None,
        product_id: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog."""
        product = Product.create(
            id=product_id or str(uuid.uuid4()),
            name=name,
            price=Money.of(price),
            stock=stock,
            description=description or "",
            discount=discount,
            on_sale=on_sale,
            is_new=is_new,
            featured=featured,
            images=list(images or []),
            category_id=category_id,
            sustainability_score=parse_score(sustainability_score),
        )

        with self._uow as uow:
            if category_id is not None and uow.categories.get_by_id(category_id) is None:
                raise EntityNotFoundError(f"Category with ID '{category_id}' not found")
            if uow.products.get_by_id(product.id) is not None:
                raise ValidationError(f"Product with ID '{product.id}' already exists")
            uow.products.add(product)

        logger.info("product %s added: %s at %s", product.id, product.name, product.price)
        return product_to_dto(product)
