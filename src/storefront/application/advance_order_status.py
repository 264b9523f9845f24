"""Application service: Advance Order Status use case.

The fulfillment actor moves orders along the status graph.  Cancelling
is the one transition with a side effect: every item's quantity goes back
to stock, in the same unit of work as the status write.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError, InvalidTransitionError
from storefront.domain.model.order import OrderStatus
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AdvanceOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, new_status: str | OrderStatus) -> OrderDTO:
        if not isinstance(new_status, OrderStatus):
            new_status = OrderStatus.parse(new_status)

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id, for_update=True)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous = order.advance_to(new_status)
            if not uow.orders.update_status(order, expected=previous):
                logger.warning(
                    "order #%s left %s before the move to %s was written",
                    order_id, previous.value, new_status.value,
                )
                raise InvalidTransitionError(
                    f"Order #{order_id} is no longer {previous.value}; "
                    f"cannot move it to {new_status.value}"
                )

            if new_status is OrderStatus.CANCELLED:
                for item in order.items:
                    uow.products.increment_stock(item.product_id, item.quantity.value)
                logger.info(
                    "order #%s cancelled, restocked %d lines", order_id, len(order.items)
                )

        logger.info(
            "order #%s: %s -> %s", order_id, previous.value, new_status.value
        )
        return order_to_dto(order)
