import pytest
from decimal import Decimal

from goalplanner.domain.errors import (
    CurrencyMismatch,
    InsufficientAmount,
    InvalidAmount,
    InvalidCurrency,
    InvalidFactor,
    InvalidFormat,
)
from goalplanner.domain.money import Money


def test_money_defaults_to_brl():
    m = Money(100)
    assert m.currency == "BRL"
    assert m.amount == Decimal("100.00")


@pytest.mark.parametrize("code", ["usd", "Eur", "brl"])
def test_money_currency_is_upper_cased(code):
    assert Money(10, code).currency == code.upper()


def test_money_quantizes_half_up():
    assert Money(Decimal("12.345")).amount == Decimal("12.35")


def test_money_accepts_float_and_str():
    assert Money(10.5).amount == Decimal("10.50")
    assert Money("99.90").amount == Decimal("99.90")


def test_money_rejects_negative():
    with pytest.raises(InvalidAmount):
        Money(-0.01)


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), "abc", True, None])
def test_money_rejects_non_finite_or_non_numeric(bad):
    with pytest.raises(InvalidAmount):
        Money(bad)


@pytest.mark.parametrize("bad", ["", "  ", "US", "EURO", "R$1"])
def test_money_rejects_invalid_currency(bad):
    with pytest.raises(InvalidCurrency):
        Money(1, bad)


def test_add_same_currency():
    assert Money(100).add(Money(50)).amount == Decimal("150")
    assert (Money(1, "USD") + Money(2, "USD")) == Money(3, "USD")


def test_cross_currency_operations_fail():
    with pytest.raises(CurrencyMismatch):
        Money(100, "BRL").add(Money(1, "USD"))
    with pytest.raises(CurrencyMismatch):
        Money(100, "BRL").subtract(Money(1, "USD"))
    with pytest.raises(CurrencyMismatch):
        Money(100, "BRL").is_greater_than(Money(1, "USD"))


def test_subtract_more_than_available_fails():
    with pytest.raises(InsufficientAmount):
        Money(100).subtract(Money(150))


def test_subtract_down_to_zero_ok():
    assert Money(100).subtract(Money(100)).is_zero()


def test_domain_errors_are_value_errors():
    with pytest.raises(ValueError):
        Money(100).subtract(Money(150))


def test_multiply():
    assert Money(100).multiply(Decimal("1.5")).amount == Decimal("150")
    assert (Money(1500) * 24).amount == Decimal("36000")
    assert Money(100).multiply(0).is_zero()


def test_multiply_negative_factor_fails():
    with pytest.raises(InvalidFactor):
        Money(100).multiply(-1)


def test_comparisons():
    assert Money(200).is_greater_than(Money(100))
    assert Money(100).is_less_than(Money(200))
    assert not Money(100).is_greater_than(Money(100))
    assert Money.zero("usd").is_zero()


def test_structural_equality():
    assert Money(10, "BRL") == Money(Decimal("10.00"), "brl")
    assert Money(10, "BRL") != Money(10, "USD")
    assert len({Money(10), Money(Decimal("10.00"))}) == 1


def test_immutable():
    m = Money(10)
    with pytest.raises(Exception):
        m.amount = Decimal("20")  # type: ignore[misc]


def test_format_pt_br():
    assert Money(Decimal("1234.56")).format() == "R$ 1.234,56"
    assert Money(Decimal("1234567.8"), "USD").format() == "US$ 1.234.567,80"
    assert Money(5, "JPY").format() == "JPY 5,00"


def test_str():
    assert str(Money(100)) == "100.00 BRL"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1234.56", Decimal("1234.56")),
        ("1.234,56", Decimal("1234.56")),
        ("R$ 10,00", Decimal("10.00")),
        ("  42 ", Decimal("42.00")),
        ("1,234.56", Decimal("1234.56")),
        ("US$ 1,234,567.89", Decimal("1234567.89")),
        ("1.234.567,89", Decimal("1234567.89")),
    ],
)
def test_from_str(raw, expected):
    assert Money.from_str(raw).amount == expected


@pytest.mark.parametrize("raw", ["", "abc", "R$", "1.2.3"])
def test_from_str_invalid_format(raw):
    with pytest.raises(InvalidFormat):
        Money.from_str(raw)


def test_from_str_negative_is_invalid_amount():
    with pytest.raises(InvalidAmount):
        Money.from_str("-5")


@pytest.mark.parametrize("exp", [26, 27, 40])
def test_money_handles_amounts_beyond_default_precision(exp):
    m = Money(10**exp)
    assert m.amount == Decimal(10**exp)
    assert m.amount.as_tuple().exponent == -2
    assert m.is_greater_than(Money(1))

