"""Unit of Work: the transaction boundary.

Application handlers open a unit of work for each request, reach every
repository through it, and let the context manager commit on a clean
exit or roll back on any exception.  Nothing a handler writes is visible
to anyone else until the block exits cleanly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import (
    CategoryRepository,
    ProductRepository,
)
from storefront.domain.repository.review_repository import ReviewRepository


class UnitOfWork(ABC):

    products: ProductRepository
    categories: CategoryRepository
    carts: CartRepository
    orders: OrderRepository
    reviews: ReviewRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._end()

    @abstractmethod
    def _begin(self) -> None:
        """Open the transaction and bind repositories to it."""

    @abstractmethod
    def _end(self) -> None:
        """Release whatever ``_begin`` acquired."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this unit of work durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change in this unit of work."""
