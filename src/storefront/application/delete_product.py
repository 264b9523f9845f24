"""Application service: Delete Product use case.

Reviews go with the product.  Orders keep their item snapshots, and cart
lines stay put so the owner's next checkout fails with
``ProductUnavailable`` instead of silently dropping the line.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str) -> None:
        with self._uow as uow:
            if not uow.products.delete(product_id):
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        logger.info("product %s deleted", product_id)
