"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError, ForbiddenError
from storefront.domain.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        order_id: int,
        requesting_user_id: str,
        privileged: bool = False,
    ) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        if not privileged and not order.is_owned_by(requesting_user_id):
            raise ForbiddenError(f"Order #{order_id} belongs to another user")
        return order_to_dto(order)
