"""Application service: List Products use case (query)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from storefront.application.dto import ProductPageDTO, page_meta, product_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.pagination import PageRequest
from storefront.domain.repository.product_repository import ProductQuery, ProductSort
from storefront.domain.unit_of_work import UnitOfWork


def _price(raw: str | None, name: str) -> Decimal | None:
    if raw is None or raw == "":
        return None
    try:
        value = Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid {name}: {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise ValidationError(f"{name} must be a non-negative number")
    return value


def _sort(raw: str | None) -> ProductSort:
    if not raw:
        return ProductSort.CREATED_AT
    try:
        return ProductSort(raw)
    except ValueError as exc:
        names = ", ".join(s.value for s in ProductSort)
        raise ValidationError(f"Invalid sortBy '{raw}'. Must be one of: {names}") from exc


def _descending(raw: str | None) -> bool:
    if not raw:
        return True
    if raw not in ("asc", "desc"):
        raise ValidationError(f"Invalid sortOrder '{raw}'. Must be 'asc' or 'desc'")
    return raw == "desc"


class ListProductsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        sustainability_threshold: Decimal = Decimal("4"),
    ) -> None:
        self._uow = uow
        self._sustainability_threshold = sustainability_threshold

    def handle(
        self,
        category_id: str | None = None,
        min_price: str | None = None,
        max_price: str | None = None,
        in_stock: bool = False,
        sustainable: bool = False,
        featured: bool | None = None,
        is_new: bool | None = None,
        on_sale: bool | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> ProductPageDTO:
        query = ProductQuery(
            category_id=category_id or None,
            min_price=_price(min_price, "minPrice"),
            max_price=_price(max_price, "maxPrice"),
            in_stock=in_stock,
            sustainable=sustainable,
            sustainability_threshold=self._sustainability_threshold,
            featured=featured,
            is_new=is_new,
            on_sale=on_sale,
            search=(search or "").strip() or None,
            sort_by=_sort(sort_by),
            descending=_descending(sort_order),
            page=PageRequest(page=page, limit=limit),
        )
        with self._uow as uow:
            result = uow.products.search(query)
        return ProductPageDTO(
            products=[product_to_dto(p) for p in result.items],
            meta=page_meta(result),
        )
