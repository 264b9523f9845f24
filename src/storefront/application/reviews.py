"""Application services: Review use cases.

Every review write recomputes the product's rating aggregate inside the
same unit of work, so no reader ever sees a rating that disagrees with
the review set.
"""

from __future__ import annotations

import logging

from storefront.application.dto import (
    ReviewDTO,
    ReviewPageDTO,
    page_meta,
    review_to_dto,
)
from storefront.domain.exceptions import DuplicateReviewError, EntityNotFoundError
from storefront.domain.model.pagination import PageRequest
from storefront.domain.model.review import Review
from storefront.domain.service.rating_aggregator import RatingAggregator
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _require_product(uow: UnitOfWork, product_id: str) -> None:
    if uow.products.get_by_id(product_id) is None:
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")


def _recompute(uow: UnitOfWork, product_id: str) -> None:
    aggregate = RatingAggregator(uow.products, uow.reviews).recompute(product_id)
    logger.info(
        "product %s rating now %s over %d reviews",
        product_id, aggregate.rating, aggregate.reviews_count,
    )


class SubmitReviewHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        user_id: str,
        rating: int,
        title: str,
        comment: str,
    ) -> ReviewDTO:
        """Create the user's one review of a product."""
        review = Review.create(product_id, user_id, rating, title, comment)

        with self._uow as uow:
            _require_product(uow, product_id)
            if uow.reviews.get_for_user(product_id, user_id) is not None:
                raise DuplicateReviewError("You have already reviewed this product")
            uow.reviews.add(review)
            _recompute(uow, product_id)

        return review_to_dto(review)


class UpdateReviewHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        user_id: str,
        rating: int,
        title: str,
        comment: str,
    ) -> ReviewDTO:
        with self._uow as uow:
            review = uow.reviews.get_for_user(product_id, user_id)
            if review is None:
                raise EntityNotFoundError("Review not found")
            review.revise(rating, title, comment)
            uow.reviews.save(review)
            _recompute(uow, product_id)

        return review_to_dto(review)


class DeleteReviewHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, user_id: str) -> None:
        with self._uow as uow:
            review = uow.reviews.get_for_user(product_id, user_id)
            if review is None:
                raise EntityNotFoundError("Review not found")
            uow.reviews.delete(review)
            _recompute(uow, product_id)


class ShowUserReviewHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, user_id: str) -> ReviewDTO:
        with self._uow as uow:
            review = uow.reviews.get_for_user(product_id, user_id)
        if review is None:
            raise EntityNotFoundError("Review not found")
        return review_to_dto(review)


class ListReviewsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, page: int = 1, limit: int = 10) -> ReviewPageDTO:
        request = PageRequest(page=page, limit=limit)
        with self._uow as uow:
            _require_product(uow, product_id)
            result = uow.reviews.list_for_product(product_id, request)
        return ReviewPageDTO(
            reviews=[review_to_dto(r) for r in result.items],
            meta=page_meta(result),
        )


class MarkReviewHelpfulHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, review_id: int) -> ReviewDTO:
        with self._uow as uow:
            if not uow.reviews.increment_helpful(review_id):
                raise EntityNotFoundError(f"Review #{review_id} not found")
            review = uow.reviews.get_by_id(review_id)
        return review_to_dto(review)  # type: ignore[arg-type]
