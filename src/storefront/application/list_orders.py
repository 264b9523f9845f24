"""Application services: order listings (queries)."""

from __future__ import annotations

from storefront.application.dto import OrderPageDTO, order_to_dto, page_meta
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.pagination import PageRequest
from storefront.domain.unit_of_work import UnitOfWork


class ListOrdersHandler:
    """A user's own orders, newest first."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, page: int = 1, limit: int = 10) -> OrderPageDTO:
        request = PageRequest(page=page, limit=limit)
        with self._uow as uow:
            result = uow.orders.list_for_user(user_id, request)
        return OrderPageDTO(
            orders=[order_to_dto(o) for o in result.items],
            meta=page_meta(result),
        )


class ListAllOrdersHandler:
    """Every order, for the fulfillment actor."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> OrderPageDTO:
        request = PageRequest(page=page, limit=limit)
        wanted = OrderStatus.parse(status) if status else None
        with self._uow as uow:
            result = uow.orders.list_all(request, status=wanted)
        return OrderPageDTO(
            orders=[order_to_dto(o) for o in result.items],
            meta=page_meta(result),
        )
