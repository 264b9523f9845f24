"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the boundaries (CLI, HTTP) and the application
layer without exposing domain internals.  Money is rendered as a
two-decimal string (``"64.80"``) so no float ever leaves the engine.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order
from storefront.domain.model.pagination import Page
from storefront.domain.model.product import Category, Product
from storefront.domain.model.review import Review
from storefront.domain.service.pricing import PriceBreakdown, PriceLine


@dataclass(frozen=True)
class PageMetaDTO:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class CategoryDTO:
    id: str
    slug: str
    name: str
    description: str | None
    image: str | None
    featured: bool
    product_count: int | None = None


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    description: str
    price: str
    effective_price: str
    stock: int
    discount: int | None
    on_sale: bool
    is_new: bool
    featured: bool
    rating: str
    reviews_count: int
    images: list[str]
    category_id: str | None
    sustainability_score: str | None
    created_at: str


@dataclass(frozen=True)
class ProductPageDTO:
    products: list[ProductDTO]
    meta: PageMetaDTO


@dataclass(frozen=True)
class CartLineDTO:
    product: ProductDTO
    quantity: int


@dataclass(frozen=True)
class CartDTO:
    """Output: the current contents of a user's cart."""

    items: list[CartLineDTO]


@dataclass(frozen=True)
class CheckoutLineDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    effective_unit_price: str
    line_total: str


@dataclass(frozen=True)
class CheckoutPreviewDTO:
    """Output: what the cart would cost if ordered right now."""

    lines: list[CheckoutLineDTO]
    subtotal: str
    shipping: str
    tax: str
    total: str


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    user_id: str
    status: str
    items: list[OrderItemDTO]
    subtotal: str
    shipping: str
    tax: str
    total: str
    shipping_address: dict[str, str | None]
    payment_method: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    meta: PageMetaDTO


@dataclass(frozen=True)
class ReviewDTO:
    id: int
    product_id: str
    user_id: str
    rating: int
    title: str
    comment: str
    helpful: int
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class ReviewPageDTO:
    reviews: list[ReviewDTO]
    meta: PageMetaDTO


# --- Mapping ------------------------------------------------------------------


def page_meta(page: Page) -> PageMetaDTO:
    return PageMetaDTO(
        page=page.page,
        limit=page.limit,
        total=page.total,
        total_pages=page.total_pages,
    )


def category_to_dto(category: Category, product_count: int | None = None) -> CategoryDTO:
    return CategoryDTO(
        id=category.id,
        slug=category.slug,
        name=category.name,
        description=category.description,
        image=category.image,
        featured=category.featured,
        product_count=product_count,
    )


def product_to_dto(product: Product) -> ProductDTO:
    effective = PriceLine.for_product(product, 1).effective_unit_price
    return ProductDTO(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price.to_plain(),
        effective_price=effective.to_plain(),
        stock=product.stock,
        discount=product.discount,
        on_sale=product.on_sale,
        is_new=product.is_new,
        featured=product.featured,
        rating=str(product.rating),
        reviews_count=product.reviews_count,
        images=list(product.images),
        category_id=product.category_id,
        sustainability_score=(
            str(product.sustainability_score)
            if product.sustainability_score is not None
            else None
        ),
        created_at=product.created_at.isoformat(),
    )


def preview_to_dto(
    priced: list[tuple[Product, PriceLine]], breakdown: PriceBreakdown
) -> CheckoutPreviewDTO:
    return CheckoutPreviewDTO(
        lines=[
            CheckoutLineDTO(
                product_id=product.id,
                product_name=product.name,
                quantity=line.quantity.value,
                unit_price=line.unit_price.to_plain(),
                effective_unit_price=line.effective_unit_price.to_plain(),
                line_total=line.line_total.to_plain(),
            )
            for product, line in priced
        ],
        subtotal=breakdown.subtotal.to_plain(),
        shipping=breakdown.shipping.to_plain(),
        tax=breakdown.tax.to_plain(),
        total=breakdown.total.to_plain(),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=item.unit_price.to_plain(),
                line_total=item.line_total.to_plain(),
            )
            for item in order.items
        ],
        subtotal=order.subtotal.to_plain(),
        shipping=order.shipping.to_plain(),
        tax=order.tax.to_plain(),
        total=order.total.to_plain(),
        shipping_address=order.shipping_address.to_dict(),
        payment_method=order.payment_method,
        created_at=order.created_at.isoformat(),
        updated_at=order.updated_at.isoformat(),
    )


def review_to_dto(review: Review) -> ReviewDTO:
    return ReviewDTO(
        id=review.id,  # type: ignore[arg-type]
        product_id=review.product_id,
        user_id=review.user_id,
        rating=review.rating,
        title=review.title,
        comment=review.comment,
        helpful=review.helpful,
        created_at=review.created_at.isoformat(),
        updated_at=review.updated_at.isoformat(),
    )
