"""Integration tests for reading orders: ownership and listings."""

import pytest

from storefront.application.advance_order_status import AdvanceOrderStatusHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.list_orders import ListAllOrdersHandler, ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import EntityNotFoundError, ForbiddenError, ValidationError
from storefront.domain.service.pricing import PricingEngine
from tests.fakes import (
    FakeUnitOfWork,
    InMemoryStore,
    make_address,
    make_product,
    put_in_cart,
    seed,
)


def _setup() -> tuple[FakeUnitOfWork, dict[str, list[int]]]:
    """Alice places two orders, Bob one."""
    store = seed(InMemoryStore(), make_product("p1", "Widget", "10.00", stock=100))
    uow = FakeUnitOfWork(store)
    create = CreateOrderHandler(uow, PricingEngine())
    placed: dict[str, list[int]] = {"alice": [], "bob": []}
    for user in ("alice", "bob", "alice"):
        put_in_cart(store, user, "p1", 1)
        placed[user].append(create.handle(user, make_address(), "card").id)
    return uow, placed


class TestShowOrder:

    def test_owner_can_read(self):
        uow, placed = _setup()
        dto = ShowOrderHandler(uow).handle(placed["bob"][0], "bob")
        assert dto.user_id == "bob"
        assert dto.shipping_address["city"] == "London"

    def test_other_user_forbidden(self):
        uow, placed = _setup()
        with pytest.raises(ForbiddenError):
            ShowOrderHandler(uow).handle(placed["bob"][0], "alice")

    def test_privileged_reader(self):
        uow, placed = _setup()
        dto = ShowOrderHandler(uow).handle(placed["bob"][0], "admin", privileged=True)
        assert dto.user_id == "bob"

    def test_missing(self):
        uow, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="#404"):
            ShowOrderHandler(uow).handle(404, "alice")


class TestListings:

    def test_own_orders_newest_first(self):
        uow, placed = _setup()
        page = ListOrdersHandler(uow).handle("alice")
        assert [o.id for o in page.orders] == list(reversed(placed["alice"]))
        assert page.meta.total == 2

    def test_all_orders_with_status_filter(self):
        uow, placed = _setup()
        AdvanceOrderStatusHandler(uow).handle(placed["bob"][0], "PROCESSING")
        page = ListAllOrdersHandler(uow).handle(status="processing")
        assert [o.id for o in page.orders] == placed["bob"]
        assert ListAllOrdersHandler(uow).handle().meta.total == 3

    def test_bad_status_filter(self):
        uow, _ = _setup()
        with pytest.raises(ValidationError):
            ListAllOrdersHandler(uow).handle(status="LOST")

    def test_pagination(self):
        uow, _ = _setup()
        page = ListAllOrdersHandler(uow).handle(page=2, limit=2)
        assert len(page.orders) == 1
        assert page.meta.total_pages == 2
