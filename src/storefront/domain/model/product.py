"""Product and Category aggregates.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves, products are added to the catalog.  Orders
capture a snapshot of the price, so nothing here ever rewrites history.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@dataclass
class Category:
    id: str
    slug: str
    name: str
    description: str | None = None
    image: str | None = None
    featured: bool = False

    @staticmethod
    def create(
        id: str,
        slug: str,
        name: str,
        description: str | None = None,
        image: str | None = None,
        featured: bool = False,
    ) -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        slug = (slug or "").strip().lower()
        if not SLUG_PATTERN.match(slug):
            raise ValidationError(
                f"Category slug '{slug}' must be lower-case letters, digits and hyphens"
            )
        return Category(
            id=id,
            slug=slug,
            name=name.strip(),
            description=description,
            image=image,
            featured=featured,
        )


@dataclass
class Product:
    """A product in the catalog.

    This is an aggregate root — it is the entry point for any
    operation involving a product.  ``rating`` and ``reviews_count`` are
    derived from the product's reviews and only the rating aggregator
    writes them.

    Use ``Product.create()`` for new products.  The ``__init__`` stays
    simple so repositories can reconstitute stored rows without
    re-validating.
    """

    id: str
    name: str
    price: Money
    stock: int
    description: str = ""
    discount: int | None = None
    on_sale: bool = False
    is_new: bool = False
    featured: bool = False
    rating: Decimal = Decimal("0")
    reviews_count: int = 0
    images: list[str] = field(default_factory=list)
    category_id: str | None = None
    sustainability_score: Decimal | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        id: str,
        name: str,
        price: Money,
        stock: int,
        **attrs,
    ) -> Product:
        """Create a new catalog product, enforcing all invariants."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        product = Product(id=id, name=name.strip(), price=price, stock=stock, **attrs)
        product.validate()
        return product

    # --- Mutations ------------------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def put_on_sale(self, discount: int) -> None:
        self.discount = discount
        self.on_sale = True
        self.validate()

    def end_sale(self) -> None:
        self.on_sale = False

    def validate(self) -> None:
        if self.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise ValidationError("Stock must be an integer")
        if self.stock < 0:
            raise ValidationError("Stock cannot be negative")
        if self.discount is not None and not 0 <= self.discount <= 100:
            raise ValidationError("Discount must be between 0 and 100")
        if self.on_sale and not self.discount:
            raise ValidationError("A product on sale needs a discount greater than zero")
        if self.sustainability_score is not None and not (
            Decimal("0") <= self.sustainability_score <= Decimal("5")
        ):
            raise ValidationError("Sustainability score must be between 0 and 5")

    # --- Computed properties --------------------------------------------------

    @property
    def effective_discount(self) -> int | None:
        """The discount that actually applies right now, if any."""
        if self.on_sale and self.discount:
            return self.discount
        return None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
