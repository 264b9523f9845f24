"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.pagination import Page, PageRequest


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int, for_update: bool = False) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Insert a new order with its items, assigning ``order.id``."""

    @abstractmethod
    def update_status(self, order: Order, expected: OrderStatus) -> bool:
        """Write the order's new status if the stored one is still *expected*.

        Returns False, changing nothing, when another writer moved the order
        first.  Nothing else on an order ever changes.
        """

    @abstractmethod
    def list_for_user(self, user_id: str, page: PageRequest) -> Page[Order]:
        """Return the user's orders, newest first."""

    @abstractmethod
    def list_all(self, page: PageRequest, status: OrderStatus | None = None) -> Page[Order]:
        """Return every order (optionally one status), newest first."""
