"""Domain service: Rating Aggregator.

A product's ``rating`` and ``reviews_count`` are a pure function of its
review ratings.  The service recomputes them from scratch every time
rather than adjusting a running average, so a missed update can never
leave drift behind.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository

ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class RatingAggregate:
    rating: Decimal
    reviews_count: int


def aggregate_ratings(ratings: Sequence[int]) -> RatingAggregate:
    """Mean rounded half-up to one decimal; zero reviews rate 0."""
    if not ratings:
        return RatingAggregate(rating=Decimal("0"), reviews_count=0)
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return RatingAggregate(
        rating=mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP),
        reviews_count=len(ratings),
    )


class RatingAggregator:

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
    ) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo

    def recompute(self, product_id: str) -> RatingAggregate:
        """Rewrite the product's aggregate from its current review set.

        Must run inside the unit of work that changed the reviews.
        """
        if self._product_repo.get_by_id(product_id, for_update=True) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        aggregate = aggregate_ratings(self._review_repo.ratings_for_product(product_id))
        self._product_repo.set_rating(
            product_id, aggregate.rating, aggregate.reviews_count
        )
        return aggregate
