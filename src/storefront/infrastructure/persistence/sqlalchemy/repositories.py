"""SQLAlchemy-backed implementations of the domain repositories.

Every repository works on the session owned by the current unit of work
and never commits.  Stock and cart quantity changes are single
conditional statements, so concurrent requests are serialised by the
database rather than by application code.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.domain.exceptions import DuplicateReviewError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.order import Order, OrderItem, OrderStatus
from storefront.domain.model.pagination import Page, PageRequest
from storefront.domain.model.product import Category, Product
from storefront.domain.model.review import Review
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import (
    CategoryRepository,
    ProductQuery,
    ProductRepository,
    ProductSort,
)
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.infrastructure.persistence.sqlalchemy.tables import (
    CartItemRow,
    CategoryRow,
    OrderItemRow,
    OrderRow,
    ProductRow,
    ReviewRow,
)

_UPSERT_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}

_SORT_COLUMNS = {
    ProductSort.NAME: ProductRow.name,
    ProductSort.PRICE: ProductRow.price,
    ProductSort.RATING: ProductRow.rating,
    ProductSort.CREATED_AT: ProductRow.created_at,
    ProductSort.REVIEWS_COUNT: ProductRow.reviews_count,
}


def _aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything we store is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _now() -> datetime:
    return datetime.now(timezone.utc)


# --- Catalog ------------------------------------------------------------------


class SqlAlchemyCategoryRepository(CategoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, category_id: str) -> Category | None:
        row = self._session.get(CategoryRow, category_id)
        return self._to_domain(row) if row else None

    def get_by_slug(self, slug: str) -> Category | None:
        row = self._session.scalar(select(CategoryRow).where(CategoryRow.slug == slug))
        return self._to_domain(row) if row else None

    def get_by_name(self, name: str) -> Category | None:
        row = self._session.scalar(select(CategoryRow).where(CategoryRow.name == name))
        return self._to_domain(row) if row else None

    def list_all(self, featured_only: bool = False) -> list[tuple[Category, int]]:
        stmt = (
            select(CategoryRow, func.count(ProductRow.id))
            .outerjoin(ProductRow, ProductRow.category_id == CategoryRow.id)
            .group_by(CategoryRow.id)
            .order_by(CategoryRow.name.asc())
        )
        if featured_only:
            stmt = stmt.where(CategoryRow.featured.is_(True))
        return [(self._to_domain(row), count) for row, count in self._session.execute(stmt)]

    def add(self, category: Category) -> None:
        self._session.add(
            CategoryRow(
                id=category.id,
                slug=category.slug,
                name=category.name,
                description=category.description,
                image=category.image,
                featured=category.featured,
            )
        )
        self._session.flush()

    @staticmethod
    def _to_domain(row: CategoryRow) -> Category:
        return Category(
            id=row.id,
            slug=row.slug,
            name=row.name,
            description=row.description,
            image=row.image,
            featured=row.featured,
        )


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, product_id: str, for_update: bool = False) -> Product | None:
        row = self._session.get(
            ProductRow,
            product_id,
            populate_existing=True,
            with_for_update=True if for_update else None,
        )
        return self._to_domain(row) if row else None

    def search(self, query: ProductQuery) -> Page[Product]:
        conditions = []
        if query.category_id:
            conditions.append(ProductRow.category_id == query.category_id)
        if query.min_price is not None:
            conditions.append(ProductRow.price >= query.min_price)
        if query.max_price is not None:
            conditions.append(ProductRow.price <= query.max_price)
        if query.in_stock:
            conditions.append(ProductRow.stock > 0)
        if query.sustainable:
            conditions.append(
                ProductRow.sustainability_score >= query.sustainability_threshold
            )
        if query.featured is not None:
            conditions.append(ProductRow.featured.is_(query.featured))
        if query.is_new is not None:
            conditions.append(ProductRow.is_new.is_(query.is_new))
        if query.on_sale is not None:
            conditions.append(ProductRow.on_sale.is_(query.on_sale))
        if query.search:
            pattern = f"%{query.search.lower()}%"
            conditions.append(
                or_(
                    func.lower(ProductRow.name).like(pattern),
                    func.lower(ProductRow.description).like(pattern),
                )
            )

        total = self._session.scalar(
            select(func.count()).select_from(ProductRow).where(*conditions)
        )

        column = _SORT_COLUMNS[query.sort_by]
        primary = column.desc() if query.descending else column.asc()
        rows = self._session.scalars(
            select(ProductRow)
            .where(*conditions)
            .order_by(primary, ProductRow.id.asc())
            .offset(query.page.offset)
            .limit(query.page.limit)
        ).all()

        return Page(
            items=[self._to_domain(r) for r in rows],
            total=total or 0,
            page=query.page.page,
            limit=query.page.limit,
        )

    def add(self, product: Product) -> None:
        self._session.add(
            ProductRow(
                id=product.id,
                name=product.name,
                description=product.description,
                price=product.price.amount,
                stock=product.stock,
                discount=product.discount,
                on_sale=product.on_sale,
                is_new=product.is_new,
                featured=product.featured,
                rating=product.rating,
                reviews_count=product.reviews_count,
                images=list(product.images),
                category_id=product.category_id,
                sustainability_score=product.sustainability_score,
                created_at=product.created_at,
            )
        )
        self._session.flush()

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id)
        if row is None:
            self.add(product)
            return
        row.name = product.name
        row.description = product.description
        row.price = product.price.amount
        row.stock = product.stock
        row.discount = product.discount
        row.on_sale = product.on_sale
        row.is_new = product.is_new
        row.featured = product.featured
        row.images = list(product.images)
        row.category_id = product.category_id
        row.sustainability_score = product.sustainability_score
        self._session.flush()

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        result = self._session.execute(
            update(ProductRow)
            .where(ProductRow.id == product_id, ProductRow.stock >= quantity)
            .values(stock=ProductRow.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_stock(self, product_id: str, quantity: int) -> None:
        self._session.execute(
            update(ProductRow)
            .where(ProductRow.id == product_id)
            .values(stock=ProductRow.stock + quantity)
            .execution_options(synchronize_session=False)
        )

    def set_rating(self, product_id: str, rating: Decimal, reviews_count: int) -> None:
        self._session.execute(
            update(ProductRow)
            .where(ProductRow.id == product_id)
            .values(rating=rating, reviews_count=reviews_count)
            .execution_options(synchronize_session=False)
        )

    def delete(self, product_id: str) -> bool:
        self._session.execute(
            delete(ReviewRow)
            .where(ReviewRow.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(
            delete(ProductRow)
            .where(ProductRow.id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            description=row.description,
            price=Money(Decimal(row.price)),
            stock=row.stock,
            discount=row.discount,
            on_sale=row.on_sale,
            is_new=row.is_new,
            featured=row.featured,
            rating=Decimal(row.rating),
            reviews_count=row.reviews_count,
            images=list(row.images or []),
            category_id=row.category_id,
            sustainability_score=(
                Decimal(row.sustainability_score)
                if row.sustainability_score is not None
                else None
            ),
            created_at=_aware(row.created_at),
        )


# --- Cart ---------------------------------------------------------------------


class SqlAlchemyCartRepository(CartRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_user(self, user_id: str) -> list[CartItem]:
        rows = self._session.scalars(
            select(CartItemRow)
            .where(CartItemRow.user_id == user_id)
            .order_by(CartItemRow.created_at.asc(), CartItemRow.id.asc())
            .execution_options(populate_existing=True)
        ).all()
        return [self._to_domain(r) for r in rows]

    def get(self, user_id: str, product_id: str) -> CartItem | None:
        row = self._session.scalar(
            select(CartItemRow)
            .where(CartItemRow.user_id == user_id, CartItemRow.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        return self._to_domain(row) if row else None

    def add_quantity(
        self, user_id: str, product_id: str, quantity: int, max_quantity: int
    ) -> int | None:
        dialect = self._session.get_bind().dialect.name
        make_insert = _UPSERT_INSERTS.get(dialect)
        if make_insert is None:
            return self._add_quantity_locked(user_id, product_id, quantity, max_quantity)

        stmt = make_insert(CartItemRow).values(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            created_at=_now(),
        )
        merged = CartItemRow.quantity + stmt.excluded.quantity
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "product_id"],
            set_={"quantity": merged},
            where=merged <= max_quantity,
        )
        if self._session.execute(stmt).rowcount == 0:
            return None
        return self._session.scalar(
            select(CartItemRow.quantity).where(
                CartItemRow.user_id == user_id, CartItemRow.product_id == product_id
            )
        )

    def _add_quantity_locked(
        self, user_id: str, product_id: str, quantity: int, max_quantity: int
    ) -> int | None:
        # Dialects without ON CONFLICT fall back to a locked read-modify-write.
        row = self._session.scalar(
            select(CartItemRow)
            .where(CartItemRow.user_id == user_id, CartItemRow.product_id == product_id)
            .with_for_update()
        )
        if row is None:
            row = CartItemRow(
                user_id=user_id, product_id=product_id, quantity=quantity, created_at=_now()
            )
            self._session.add(row)
        elif row.quantity + quantity > max_quantity:
            return None
        else:
            row.quantity += quantity
        self._session.flush()
        return row.quantity

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> bool:
        result = self._session.execute(
            update(CartItemRow)
            .where(CartItemRow.user_id == user_id, CartItemRow.product_id == product_id)
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def remove(self, user_id: str, product_id: str) -> bool:
        result = self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.user_id == user_id, CartItemRow.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def clear(self, user_id: str) -> int:
        result = self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def _to_domain(row: CartItemRow) -> CartItem:
        return CartItem(
            user_id=row.user_id,
            product_id=row.product_id,
            quantity=row.quantity,
            created_at=_aware(row.created_at),
        )


# --- Orders -------------------------------------------------------------------


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, order_id: int, for_update: bool = False) -> Order | None:
        row = self._session.get(
            OrderRow,
            order_id,
            populate_existing=True,
            with_for_update=True if for_update else None,
        )
        return self._to_domain(row) if row else None

    def add(self, order: Order) -> None:
        row = OrderRow(
            user_id=order.user_id,
            status=order.status.value,
            subtotal=order.subtotal.amount,
            shipping=order.shipping.amount,
            tax=order.tax.amount,
            total=order.total.amount,
            shipping_address=order.shipping_address.to_dict(),
            payment_method=order.payment_method,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRow(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=item.unit_price.amount,
                )
                for item in order.items
            ],
        )
        self._session.add(row)
        self._session.flush()
        order.id = row.id

    def update_status(self, order: Order, expected: OrderStatus) -> bool:
        result = self._session.execute(
            update(OrderRow)
            .where(OrderRow.id == order.id, OrderRow.status == expected.value)
            .values(status=order.status.value, updated_at=order.updated_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_for_user(self, user_id: str, page: PageRequest) -> Page[Order]:
        return self._page([OrderRow.user_id == user_id], page)

    def list_all(self, page: PageRequest, status: OrderStatus | None = None) -> Page[Order]:
        conditions = [OrderRow.status == status.value] if status else []
        return self._page(conditions, page)

    def _page(self, conditions: list, page: PageRequest) -> Page[Order]:
        total = self._session.scalar(
            select(func.count()).select_from(OrderRow).where(*conditions)
        )
        rows = self._session.scalars(
            select(OrderRow)
            .where(*conditions)
            .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
            .offset(page.offset)
            .limit(page.limit)
        ).all()
        return Page(
            items=[self._to_domain(r) for r in rows],
            total=total or 0,
            page=page.page,
            limit=page.limit,
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            user_id=row.user_id,
            items=[
                OrderItem(
                    product_id=i.product_id,
                    product_name=i.product_name,
                    quantity=Quantity(i.quantity),
                    unit_price=Money(Decimal(i.unit_price)),
                )
                for i in row.items
            ],
            subtotal=Money(Decimal(row.subtotal)),
            shipping=Money(Decimal(row.shipping)),
            tax=Money(Decimal(row.tax)),
            total=Money(Decimal(row.total)),
            shipping_address=ShippingAddress.from_dict(row.shipping_address),
            payment_method=row.payment_method,
            status=OrderStatus(row.status),
            created_at=_aware(row.created_at),
            updated_at=_aware(row.updated_at),
        )


# --- Reviews ------------------------------------------------------------------


class SqlAlchemyReviewRepository(ReviewRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, review_id: int) -> Review | None:
        row = self._session.get(ReviewRow, review_id, populate_existing=True)
        return self._to_domain(row) if row else None

    def get_for_user(self, product_id: str, user_id: str) -> Review | None:
        row = self._session.scalar(
            select(ReviewRow).where(
                ReviewRow.product_id == product_id, ReviewRow.user_id == user_id
            )
        )
        return self._to_domain(row) if row else None

    def add(self, review: Review) -> None:
        row = ReviewRow(
            product_id=review.product_id,
            user_id=review.user_id,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            helpful=review.helpful,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise DuplicateReviewError("You have already reviewed this product") from exc
        review.id = row.id

    def save(self, review: Review) -> None:
        self._session.execute(
            update(ReviewRow)
            .where(ReviewRow.id == review.id)
            .values(
                rating=review.rating,
                title=review.title,
                comment=review.comment,
                updated_at=review.updated_at,
            )
            .execution_options(synchronize_session=False)
        )

    def delete(self, review: Review) -> None:
        self._session.execute(
            delete(ReviewRow)
            .where(ReviewRow.id == review.id)
            .execution_options(synchronize_session=False)
        )

    def increment_helpful(self, review_id: int) -> bool:
        result = self._session.execute(
            update(ReviewRow)
            .where(ReviewRow.id == review_id)
            .values(helpful=ReviewRow.helpful + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def ratings_for_product(self, product_id: str) -> list[int]:
        return list(
            self._session.scalars(
                select(ReviewRow.rating).where(ReviewRow.product_id == product_id)
            )
        )

    def list_for_product(self, product_id: str, page: PageRequest) -> Page[Review]:
        condition = ReviewRow.product_id == product_id
        total = self._session.scalar(
            select(func.count()).select_from(ReviewRow).where(condition)
        )
        rows = self._session.scalars(
            select(ReviewRow)
            .where(condition)
            .order_by(
                ReviewRow.helpful.desc(), ReviewRow.created_at.desc(), ReviewRow.id.desc()
            )
            .offset(page.offset)
            .limit(page.limit)
            .execution_options(populate_existing=True)
        ).all()
        return Page(
            items=[self._to_domain(r) for r in rows],
            total=total or 0,
            page=page.page,
            limit=page.limit,
        )

    @staticmethod
    def _to_domain(row: ReviewRow) -> Review:
        return Review(
            id=row.id,
            product_id=row.product_id,
            user_id=row.user_id,
            rating=row.rating,
            title=row.title,
            comment=row.comment,
            helpful=row.helpful,
            created_at=_aware(row.created_at),
            updated_at=_aware(row.updated_at),
        )
