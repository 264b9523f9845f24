"""Unit tests for the pricing engine."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.pricing import PriceLine, PricingEngine, PricingRules


def _line(price: str, qty: int = 1, discount: int | None = None) -> PriceLine:
    return PriceLine(Money.of(price), Quantity(qty), discount)


def _plain(breakdown) -> tuple[str, str, str, str]:
    return (
        breakdown.subtotal.to_plain(),
        breakdown.shipping.to_plain(),
        breakdown.tax.to_plain(),
        breakdown.total.to_plain(),
    )


class TestShippingThreshold:

    def test_just_below_threshold_pays_shipping(self):
        breakdown = PricingEngine().price([_line("99.99")])
        assert breakdown.shipping == Money.of("10.00")
        assert not breakdown.free_shipping

    def test_at_threshold_ships_free(self):
        breakdown = PricingEngine().price([_line("100.00")])
        assert breakdown.shipping == Money.zero()
        assert breakdown.free_shipping

    def test_threshold_compared_before_rounding(self):
        # 3 x 33.333... rounds to 100.00 but is below the threshold.
        engine = PricingEngine()
        breakdown = engine.price([_line("33.3333", 3)])
        assert breakdown.subtotal == Money.of("100.00")
        assert breakdown.shipping == Money.of("10.00")


class TestTax:

    def test_tax_on_free_shipping_order(self):
        assert _plain(PricingEngine().price([_line("100.00")])) == (
            "100.00", "0.00", "8.00", "108.00",
        )

    def test_tax_includes_shipping(self):
        assert _plain(PricingEngine().price([_line("25.00", 2)])) == (
            "50.00", "10.00", "4.80", "64.80",
        )

    def test_total_is_sum_of_rounded_fields(self):
        breakdown = PricingEngine().price([_line("99.99")])
        assert _plain(breakdown) == ("99.99", "10.00", "8.80", "118.79")
        assert breakdown.total == breakdown.subtotal + breakdown.shipping + breakdown.tax


class TestDiscounts:

    def test_discount_applies_to_unit_price(self):
        line = _line("19.99", 3, discount=15)
        assert line.effective_unit_price.amount == Decimal("16.9915")
        assert _plain(PricingEngine().price([line])) == (
            "50.97", "10.00", "4.88", "65.85",
        )

    def test_zero_discount_is_full_price(self):
        assert _line("10.00", discount=0).effective_unit_price == Money.of("10.00")


class TestEngine:

    def test_empty_cart_prices_to_zero(self):
        assert _plain(PricingEngine().price([])) == ("0.00", "0.00", "0.00", "0.00")

    def test_deterministic(self):
        engine = PricingEngine()
        lines = [_line("19.99", 2, 10), _line("5.25", 7)]
        assert engine.price(lines) == engine.price(list(lines))

    def test_custom_rules(self):
        rules = PricingRules(
            free_shipping_threshold=Money.of("50.00"),
            standard_shipping_cost=Money.of("4.99"),
            tax_rate=Decimal("0"),
        )
        engine = PricingEngine(rules)
        assert _plain(engine.price([_line("49.00")])) == ("49.00", "4.99", "0.00", "53.99")
        assert _plain(engine.price([_line("50.00")])) == ("50.00", "0.00", "0.00", "50.00")

    def test_tax_rate_must_be_a_fraction(self):
        with pytest.raises(ValidationError, match="Tax rate"):
            PricingRules(tax_rate=Decimal("8"))
