"""Integration tests for checkout: preview and CreateOrder.

Uses the in-memory fake unit of work, no database.
"""

import threading

import pytest

from storefront.application.checkout import PreviewCheckoutHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.service.pricing import PricingEngine
from tests.fakes import (
    FakeUnitOfWork,
    InMemoryStore,
    make_address,
    make_product,
    put_in_cart,
    seed,
)


def _setup(*products) -> tuple[CreateOrderHandler, FakeUnitOfWork]:
    """Build handler with a fake unit of work, optionally pre-loaded with products."""
    if not products:
        products = (
            make_product("p1", "Widget", "25.00", stock=5),
            make_product("p2", "Gadget", "40.00", stock=5),
        )
    uow = FakeUnitOfWork(seed(InMemoryStore(), *products))
    return CreateOrderHandler(uow, PricingEngine()), uow


def _checkout(handler: CreateOrderHandler, user_id: str = "alice"):
    return handler.handle(user_id, make_address(), "card")


class TestCreateOrderHappyPath:

    def test_prices_the_cart_server_side(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 2)
        dto = _checkout(handler)
        assert (dto.subtotal, dto.shipping, dto.tax, dto.total) == (
            "50.00", "10.00", "4.80", "64.80",
        )
        assert dto.status == "PENDING"
        assert dto.user_id == "alice"
        assert [(i.product_name, i.quantity, i.unit_price) for i in dto.items] == [
            ("Widget", 2, "25.00")
        ]

    def test_assigns_order_id(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 1)
        assert _checkout(handler).id == 1

    def test_decrements_stock_and_clears_cart(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 2)
        put_in_cart(uow.store, "alice", "p2", 1)
        _checkout(handler)
        assert uow.store.products["p1"].stock == 3
        assert uow.store.products["p2"].stock == 4
        assert uow.store.cart_items == {}
        assert uow.commits == 1

    def test_leaves_other_carts_alone(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 1)
        put_in_cart(uow.store, "bob", "p1", 1)
        _checkout(handler)
        assert list(uow.store.cart_items) == [("bob", "p1")]

    def test_not_idempotent(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 1)
        first = _checkout(handler)
        put_in_cart(uow.store, "alice", "p1", 1)
        second = _checkout(handler)
        assert second.id == first.id + 1

    def test_sale_price_is_frozen_on_the_line(self):
        handler, uow = _setup(
            make_product("p1", "Lamp", "19.99", stock=5, discount=15, on_sale=True)
        )
        put_in_cart(uow.store, "alice", "p1", 3)
        dto = _checkout(handler)
        assert dto.items[0].unit_price == "16.99"
        assert dto.items[0].line_total == "50.97"
        assert (dto.subtotal, dto.shipping, dto.tax, dto.total) == (
            "50.97", "10.00", "4.88", "65.85",
        )

    def test_free_shipping_at_threshold(self):
        handler, uow = _setup(make_product("p1", "Chair", "100.00", stock=1))
        put_in_cart(uow.store, "alice", "p1", 1)
        dto = _checkout(handler)
        assert (dto.shipping, dto.tax, dto.total) == ("0.00", "8.00", "108.00")


class TestCreateOrderPriceLock:

    def test_price_snapshot_at_creation(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 1)
        dto = _checkout(handler)

        # Change the product price
        UpdateProductHandler(uow).handle("p1", price="99.99")

        # Existing order still has original price
        saved = ShowOrderHandler(uow).handle(dto.id, "alice")
        assert saved.items[0].unit_price == "25.00"
        assert saved.total == dto.total


class TestCreateOrderRefusals:

    def test_empty_cart_creates_nothing(self):
        handler, uow = _setup()
        with pytest.raises(EmptyCartError, match="Cart is empty"):
            _checkout(handler)
        assert uow.store.orders == {}

    def test_insufficient_stock_rejected(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 6)
        with pytest.raises(InsufficientStockError, match="Only 5 available"):
            _checkout(handler)
        assert uow.store.products["p1"].stock == 5
        assert ("alice", "p1") in uow.store.cart_items

    def test_vanished_product_rejected(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 1)
        put_in_cart(uow.store, "alice", "gone", 1)
        with pytest.raises(ProductUnavailableError):
            _checkout(handler)
        assert uow.store.orders == {}

    def test_bad_payment_method_rejected(self):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 1)
        with pytest.raises(ValidationError, match="Payment method"):
            handler.handle("alice", make_address(), "")

    def test_lost_stock_race_rolls_everything_back(self, monkeypatch):
        handler, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 2)
        put_in_cart(uow.store, "alice", "p2", 1)

        real_decrement = uow.products.decrement_stock

        def lose_race_on_p2(product_id, quantity):
            if product_id == "p2":
                return False
            return real_decrement(product_id, quantity)

        monkeypatch.setattr(uow.products, "decrement_stock", lose_race_on_p2)

        with pytest.raises(InsufficientStockError, match="Gadget"):
            _checkout(handler)

        assert uow.rollbacks == 1
        assert uow.store.products["p1"].stock == 5
        assert uow.store.orders == {}
        assert len(uow.store.cart_items) == 2


class TestPreviewMatchesCommit:

    def test_preview_equals_created_order(self):
        handler, uow = _setup(
            make_product("p1", "Lamp", "19.99", stock=5, discount=15, on_sale=True),
            make_product("p2", "Bulb", "3.35", stock=50),
        )
        put_in_cart(uow.store, "alice", "p1", 3)
        put_in_cart(uow.store, "alice", "p2", 7)

        preview = PreviewCheckoutHandler(uow, PricingEngine()).handle("alice")
        order = _checkout(handler)

        assert (preview.subtotal, preview.shipping, preview.tax, preview.total) == (
            order.subtotal, order.shipping, order.tax, order.total,
        )
        assert [line.line_total for line in preview.lines] == [
            item.line_total for item in order.items
        ]

    def test_preview_changes_nothing(self):
        _, uow = _setup()
        put_in_cart(uow.store, "alice", "p1", 2)
        PreviewCheckoutHandler(uow, PricingEngine()).handle("alice")
        assert uow.store.products["p1"].stock == 5
        assert uow.store.orders == {}

    def test_empty_cart_preview_is_zero(self):
        _, uow = _setup()
        preview = PreviewCheckoutHandler(uow, PricingEngine()).handle("alice")
        assert preview.lines == []
        assert preview.total == "0.00"


class TestConcurrentCheckout:

    def test_never_oversells(self):
        _, uow = _setup(make_product("p1", "Last Few", "10.00", stock=5))
        store = uow.store
        users = [f"user{i}" for i in range(8)]
        for user in users:
            put_in_cart(store, user, "p1", 1)

        outcomes: list[str] = []

        def buy(user: str) -> None:
            handler = CreateOrderHandler(FakeUnitOfWork(store), PricingEngine())
            try:
                _checkout(handler, user)
                outcomes.append("ok")
            except InsufficientStockError:
                outcomes.append("refused")

        threads = [threading.Thread(target=buy, args=(u,)) for u in users]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 5
        assert outcomes.count("refused") == 3
        assert store.products["p1"].stock == 0
        assert len(store.orders) == 5
