"""Abstract repository for cart lines.

Every mutation is keyed by (user_id, product_id) and must be a single
atomic statement in the backing store, so two requests for the same key
can never lose an update.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[CartItem]:
        """Return the user's cart lines, oldest first."""

    @abstractmethod
    def get(self, user_id: str, product_id: str) -> CartItem | None:
        """Return one cart line, or None."""

    @abstractmethod
    def add_quantity(
        self, user_id: str, product_id: str, quantity: int, max_quantity: int
    ) -> int | None:
        """Insert the line or add *quantity* to it, in one statement.

        Returns the resulting quantity, or None (changing nothing) when the
        result would exceed *max_quantity*.
        """

    @abstractmethod
    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> bool:
        """Replace the line's quantity.  Returns False if there is no line."""

    @abstractmethod
    def remove(self, user_id: str, product_id: str) -> bool:
        """Delete one line.  Returns False if there was none."""

    @abstractmethod
    def clear(self, user_id: str) -> int:
        """Delete every line the user owns, returning how many went."""
