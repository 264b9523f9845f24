"""Unit tests for Product, Category, cart lines and reviews."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import MAX_QUANTITY_PER_ITEM, check_line_quantity
from storefront.domain.model.pagination import Page, PageRequest
from storefront.domain.model.product import Category, Product
from storefront.domain.model.review import Review
from storefront.domain.model.value_objects import Money
from storefront.domain.service.rating_aggregator import aggregate_ratings


class TestProduct:

    def test_create(self):
        p = Product.create("p1", "  Widget ", Money.of("15.00"), 3)
        assert p.name == "Widget"
        assert p.in_stock

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            Product.create("p1", "Widget", Money.of("0"), 3)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Product.create("p1", "Widget", Money.of("1.00"), -1)

    def test_discount_only_applies_on_sale(self):
        p = Product.create("p1", "Widget", Money.of("10.00"), 1, discount=20)
        assert p.effective_discount is None
        p.put_on_sale(20)
        assert p.effective_discount == 20
        p.end_sale()
        assert p.effective_discount is None

    def test_on_sale_needs_discount(self):
        with pytest.raises(ValidationError, match="needs a discount"):
            Product.create("p1", "Widget", Money.of("10.00"), 1, on_sale=True)

    def test_sustainability_range(self):
        with pytest.raises(ValidationError, match="between 0 and 5"):
            Product.create(
                "p1", "Widget", Money.of("10.00"), 1, sustainability_score=Decimal("5.5")
            )


class TestCategory:

    def test_slug_is_lowercased(self):
        assert Category.create("c1", "Home-Goods", "Home").slug == "home-goods"

    def test_bad_slug_rejected(self):
        with pytest.raises(ValidationError, match="slug"):
            Category.create("c1", "home goods", "Home")


class TestCartLineQuantity:

    def test_bounds(self):
        check_line_quantity(1)
        check_line_quantity(MAX_QUANTITY_PER_ITEM)

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="greater than 0"):
            check_line_quantity(0)

    def test_over_cap_rejected(self):
        with pytest.raises(ValidationError, match="Maximum quantity per item is 10"):
            check_line_quantity(11)


class TestReview:

    def test_create_trims(self):
        r = Review.create("p1", "alice", 5, "  Great  ", "Works exactly as described.")
        assert r.title == "Great"
        assert r.helpful == 0

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError, match="between 1 and 5"):
            Review.create("p1", "alice", rating, "Title", "A long enough comment")

    def test_short_comment_rejected(self):
        with pytest.raises(ValidationError, match="Comment"):
            Review.create("p1", "alice", 4, "Title", "meh")

    def test_revise_keeps_identity(self):
        r = Review.create("p1", "alice", 5, "Great", "Works exactly as described.")
        r.id = 7
        r.revise(2, "Broke", "Stopped working after a week.")
        assert (r.id, r.rating, r.title) == (7, 2, "Broke")


class TestRatingAggregate:

    def test_mean_of_three(self):
        aggregate = aggregate_ratings([5, 4, 3])
        assert aggregate.rating == Decimal("4.0")
        assert aggregate.reviews_count == 3

    def test_rounds_half_up_to_one_place(self):
        assert aggregate_ratings([5, 4]).rating == Decimal("4.5")
        assert aggregate_ratings([5, 5, 4]).rating == Decimal("4.7")

    def test_no_reviews(self):
        aggregate = aggregate_ratings([])
        assert aggregate.rating == Decimal("0")
        assert aggregate.reviews_count == 0


class TestPagination:

    def test_offset(self):
        assert PageRequest(page=3, limit=10).offset == 20

    def test_limit_cap(self):
        with pytest.raises(ValidationError, match="between 1 and 100"):
            PageRequest(limit=101)

    def test_total_pages(self):
        assert Page(items=[], total=21, page=1, limit=10).total_pages == 3
        assert Page(items=[], total=0, page=1, limit=10).total_pages == 0
