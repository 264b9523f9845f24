"""Unit tests for Value Objects: Money, Quantity, ShippingAddress."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class TestMoney:

    def test_create_from_string(self):
        m = Money.of("15.00")
        assert m.amount == Decimal("15.00")
        assert m.currency == "USD"

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money.of("-1.00")

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("twelve")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(15.0)  # type: ignore[arg-type]

    def test_addition(self):
        assert Money.of("10.00") + Money.of("5.50") == Money.of("15.50")

    def test_multiplication_by_int(self):
        assert Money.of("15.00") * 3 == Money.of("45.00")

    def test_multiplication_by_bool_rejected(self):
        with pytest.raises(TypeError):
            Money.of("15.00") * True

    def test_subtraction_below_zero_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            Money.of("5.00") - Money.of("10.00")

    def test_currency_mismatch(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("10.00") + Money(Decimal("5.00"), "EUR")

    def test_percent_off_keeps_precision(self):
        assert Money.of("19.99").percent_off(15).amount == Decimal("16.9915")

    def test_percent_off_out_of_range(self):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Money.of("10.00").percent_off(101)

    def test_rounding_is_half_up(self):
        assert Money.of("8.125").rounded() == Money.of("8.13")
        assert Money.of("8.124").rounded() == Money.of("8.12")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"

    def test_plain_formatting(self):
        assert Money.of("64.8").to_plain() == "64.80"

    def test_comparison(self):
        assert Money.of("99.99") < Money.of("100.00")
        assert Money.of("100.00") >= Money.of("100")


class TestQuantity:

    def test_positive(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(1.5)  # type: ignore[arg-type]

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)


def _address(**overrides) -> dict:
    fields = dict(
        full_name="Ada Lovelace",
        address="12 Analytical Row",
        city="London",
        state="Greater London",
        zip_code="10001",
        country="UK",
    )
    fields.update(overrides)
    return fields


class TestShippingAddress:

    def test_valid(self):
        address = ShippingAddress(**_address())
        assert address.city == "London"
        assert address.phone is None

    def test_short_zip_rejected(self):
        with pytest.raises(ValidationError, match="zip_code"):
            ShippingAddress(**_address(zip_code="123"))

    def test_blank_field_rejected(self):
        with pytest.raises(ValidationError, match="full_name"):
            ShippingAddress(**_address(full_name="   "))

    def test_dict_round_trip(self):
        address = ShippingAddress(**_address(phone="+44 20 0000"))
        assert ShippingAddress.from_dict(address.to_dict()) == address

    def test_missing_key(self):
        raw = _address()
        del raw["city"]
        with pytest.raises(ValidationError, match="city"):
            ShippingAddress.from_dict(raw)
