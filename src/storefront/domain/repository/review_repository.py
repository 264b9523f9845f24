"""Abstract repository for Review aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.pagination import Page, PageRequest
from storefront.domain.model.review import Review


class ReviewRepository(ABC):

    @abstractmethod
    def get_by_id(self, review_id: int) -> Review | None:
        """Return a review by its ID, or None."""

    @abstractmethod
    def get_for_user(self, product_id: str, user_id: str) -> Review | None:
        """Return the user's review of a product, or None."""

    @abstractmethod
    def add(self, review: Review) -> None:
        """Insert a new review, assigning ``review.id``.

        Raises DuplicateReviewError if the (product, user) pair exists.
        """

    @abstractmethod
    def save(self, review: Review) -> None:
        """Persist changes to an existing review."""

    @abstractmethod
    def delete(self, review: Review) -> None:
        """Remove a review."""

    @abstractmethod
    def increment_helpful(self, review_id: int) -> bool:
        """Atomically add one helpful vote.  False if the review is gone."""

    @abstractmethod
    def ratings_for_product(self, product_id: str) -> list[int]:
        """Return every rating currently recorded for a product."""

    @abstractmethod
    def list_for_product(self, product_id: str, page: PageRequest) -> Page[Review]:
        """Return reviews, most helpful first, then newest."""
