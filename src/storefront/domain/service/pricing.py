"""Domain service: Pricing Engine.

Pure and deterministic: it performs no I/O and reads no clock.  The checkout
preview and order creation both call ``PricingEngine.price()`` with the
same rules, so the total a customer sees is the total that gets stored.

Rounding contract: amounts accumulate at full precision and each derived
field is rounded half-up to cents exactly once.  ``total`` is the sum of
the rounded fields, which keeps ``total == subtotal + shipping + tax``
exact on the stored order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class PricingRules:
    """The one place shipping and tax constants live."""

    free_shipping_threshold: Money = Money(Decimal("100.00"))
    standard_shipping_cost: Money = Money(Decimal("10.00"))
    tax_rate: Decimal = Decimal("0.08")

    def __post_init__(self) -> None:
        if not isinstance(self.tax_rate, Decimal):
            raise ValidationError("Tax rate must be a Decimal")
        if not Decimal("0") <= self.tax_rate < Decimal("1"):
            raise ValidationError(f"Tax rate must be in [0, 1), got {self.tax_rate}")


@dataclass(frozen=True)
class PriceLine:
    """One cart or order line as the pricing engine sees it."""

    unit_price: Money
    quantity: Quantity
    discount_percent: int | None = None

    @staticmethod
    def for_product(product: Product, quantity: int) -> PriceLine:
        return PriceLine(
            unit_price=product.price,
            quantity=Quantity(quantity),
            discount_percent=product.effective_discount,
        )

    @property
    def effective_unit_price(self) -> Money:
        if self.discount_percent:
            return self.unit_price.percent_off(self.discount_percent)
        return self.unit_price

    @property
    def line_total(self) -> Money:
        return self.effective_unit_price * self.quantity.value


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money

    @property
    def free_shipping(self) -> bool:
        return self.shipping.amount == 0


class PricingEngine:

    def __init__(self, rules: PricingRules | None = None) -> None:
        self._rules = rules or PricingRules()

    @property
    def rules(self) -> PricingRules:
        return self._rules

    def price(self, lines: Iterable[PriceLine]) -> PriceBreakdown:
        """Compute subtotal, shipping, tax and total for *lines*."""
        lines = list(lines)
        subtotal = Money.zero()
        for line in lines:
            subtotal = subtotal + line.line_total

        shipping = self.shipping_for(subtotal) if lines else Money.zero()
        tax = Money((subtotal + shipping).amount * self._rules.tax_rate)

        subtotal = subtotal.rounded()
        shipping = shipping.rounded()
        tax = tax.rounded()
        return PriceBreakdown(
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=subtotal + shipping + tax,
        )

    def shipping_for(self, subtotal: Money) -> Money:
        if subtotal >= self._rules.free_shipping_threshold:
            return Money.zero()
        return self._rules.standard_shipping_cost
