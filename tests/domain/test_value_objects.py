"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.value_objects import CustomerInfo, Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_float_keeps_printed_value(self):
        assert Money.of(29.99).amount == Decimal("29.99")

    def test_of_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten dollars")

    def test_of_rejects_bool(self):
        with pytest.raises(ValidationError):
            Money.of(True)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.0)

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_subtraction_below_zero_rejected(self):
        with pytest.raises(ValidationError):
            Money.of("3") - Money.of("10")

    def test_multiply_by_int(self):
        assert Money.of("12.50") * 3 == Money.of("37.50")

    def test_multiply_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * 1.5

    def test_apply_rate_rounds_half_up(self):
        # 0.08 * 10.5625 = 0.845 -> 0.85
        assert Money.of("10.5625").apply_rate(Decimal("0.08")).amount == Decimal("0.85")

    def test_comparison(self):
        assert Money.of("100.01") > Money.of("100")
        assert Money.of("100") <= Money.of("100.00")

    def test_currency_mismatch(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("1"), "USD") + Money(Decimal("1"), "EUR")

    def test_str(self):
        assert str(Money.of("7.5")) == "$7.50"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_rejected(self, bad):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(bad)

    @pytest.mark.parametrize("bad", [1.5, "2", True])
    def test_non_integer_rejected(self, bad):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(bad)


# ── CustomerInfo ─────────────────────────────────────────────────────────────


def _customer(**overrides):
    fields = dict(
        name="Jane Doe",
        email="jane@example.com",
        phone="555-0100",
        street="1 Main St",
        city="Springfield",
        state="IL",
        zip_code="62701",
    )
    fields.update(overrides)
    return CustomerInfo.create(**fields)


class TestCustomerInfo:

    def test_happy_path_defaults_country(self):
        customer = _customer()
        assert customer.address.country == "US"
        assert customer.address.zip_code == "62701"

    def test_strips_whitespace(self):
        assert _customer(name="  Jane  ").name == "Jane"

    @pytest.mark.parametrize("field", ["name", "email", "phone"])
    def test_missing_contact_field(self, field):
        with pytest.raises(ValidationError, match="Customer information is required"):
            _customer(**{field: "  "})

    def test_email_needs_at_sign(self):
        with pytest.raises(ValidationError, match="Invalid customer email"):
            _customer(email="jane.example.com")

    @pytest.mark.parametrize("field", ["street", "city", "state", "zip_code"])
    def test_incomplete_address(self, field):
        with pytest.raises(ValidationError, match="Complete shipping address"):
            _customer(**{field: None})
