"""Review aggregate.

One review per (product, user).  Writing a review never touches the
product directly; the rating aggregator recomputes the product's
aggregate from the full review set afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5
TITLE_LENGTH = (3, 200)
COMMENT_LENGTH = (10, 2000)


def _check_content(rating: int, title: str, comment: str) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    title = (title or "").strip()
    if not TITLE_LENGTH[0] <= len(title) <= TITLE_LENGTH[1]:
        raise ValidationError(
            f"Title must be {TITLE_LENGTH[0]}-{TITLE_LENGTH[1]} characters"
        )
    comment = (comment or "").strip()
    if not COMMENT_LENGTH[0] <= len(comment) <= COMMENT_LENGTH[1]:
        raise ValidationError(
            f"Comment must be {COMMENT_LENGTH[0]}-{COMMENT_LENGTH[1]} characters"
        )


@dataclass
class Review:
    id: int | None
    product_id: str
    user_id: str
    rating: int
    title: str
    comment: str
    helpful: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        product_id: str,
        user_id: str,
        rating: int,
        title: str,
        comment: str,
    ) -> Review:
        if not user_id:
            raise ValidationError("A review needs an author")
        _check_content(rating, title, comment)
        return Review(
            id=None,
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            title=title.strip(),
            comment=comment.strip(),
        )

    def revise(self, rating: int, title: str, comment: str) -> None:
        """Replace the review's content, keeping its identity."""
        _check_content(rating, title, comment)
        self.rating = rating
        self.title = title.strip()
        self.comment = comment.strip()
        self.updated_at = datetime.now(timezone.utc)
