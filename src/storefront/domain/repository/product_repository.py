"""Abstract repositories for the catalog: products and categories.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (SQLAlchemy, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.pagination import Page, PageRequest
from storefront.domain.model.product import Category, Product


class ProductSort(Enum):
    NAME = "name"
    PRICE = "price"
    RATING = "rating"
    CREATED_AT = "createdAt"
    REVIEWS_COUNT = "reviewsCount"


@dataclass(frozen=True)
class ProductQuery:
    """Filter, sort and page settings for ``ProductRepository.search``.

    Results are always tie-broken by product id ascending so that paging
    through equal sort keys is stable.
    """

    category_id: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    in_stock: bool = False
    sustainable: bool = False
    sustainability_threshold: Decimal = Decimal("4")
    featured: bool | None = None
    is_new: bool | None = None
    on_sale: bool | None = None
    search: str | None = None
    sort_by: ProductSort = ProductSort.CREATED_AT
    descending: bool = True
    page: PageRequest = PageRequest()

    def __post_init__(self) -> None:
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValidationError("minPrice cannot be greater than maxPrice")


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str, for_update: bool = False) -> Product | None:
        """Return a product by its ID, or None if not found.

        ``for_update`` locks the row until the unit of work ends, where the
        backing store supports it.
        """

    @abstractmethod
    def search(self, query: ProductQuery) -> Page[Product]:
        """Return one page of products matching *query*."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert a new product."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist catalog-maintenance edits to an existing product.

        Never writes ``rating``/``reviews_count``; see ``set_rating``.
        """

    @abstractmethod
    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Atomically take *quantity* units if at least that many remain.

        Returns False, changing nothing, when stock is insufficient.
        """

    @abstractmethod
    def increment_stock(self, product_id: str, quantity: int) -> None:
        """Atomically return *quantity* units to stock."""

    @abstractmethod
    def set_rating(self, product_id: str, rating: Decimal, reviews_count: int) -> None:
        """Store a recomputed rating aggregate."""

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """Remove a product and its reviews.  Returns False if it did not exist.

        Cart lines and order items naming the product are left in place.
        """


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: str) -> Category | None:
        """Return a category by its ID, or None."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Category | None:
        """Return a category by its slug, or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> Category | None:
        """Return a category by its exact name, or None."""

    @abstractmethod
    def list_all(self, featured_only: bool = False) -> list[tuple[Category, int]]:
        """Return categories ordered by name, each with its product count."""

    @abstractmethod
    def add(self, category: Category) -> None:
        """Insert a new category."""
