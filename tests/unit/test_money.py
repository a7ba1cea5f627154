from decimal import Decimal

import pytest

from expense_tracker.domain.money import cents_to_money, dollars_to_cents, parse_money_to_cents


def test_parse_money() -> None:
    assert parse_money_to_cents("$12.34") == 1234
    assert parse_money_to_cents("12.5") == 1250
    assert parse_money_to_cents("1,000") == 100000
    assert parse_money_to_cents("-2.5") == -250
    assert parse_money_to_cents("-0.50") == -50


def test_parse_money_rejects_garbage() -> None:
    for value in ("", "abc", "1.234", "12.3.4"):
        with pytest.raises(ValueError):
            parse_money_to_cents(value)


def test_dollars_to_cents_avoids_float_drift() -> None:
    assert dollars_to_cents(0.1 + 0.2) == 30
    assert dollars_to_cents(19.99) == 1999
    assert dollars_to_cents(Decimal("0.005")) == 1
    assert dollars_to_cents(7) == 700
    with pytest.raises(ValueError):
        dollars_to_cents(True)
    with pytest.raises(ValueError):
        dollars_to_cents(float("nan"))


def test_format_money() -> None:
    assert cents_to_money(1234) == "$12.34"
    assert cents_to_money(-250) == "-$2.50"
    assert cents_to_money(123456789) == "$1,234,567.89"


def test_dollars_to_cents_rejects_values_beyond_decimal_precision() -> None:
    with pytest.raises(ValueError):
        dollars_to_cents(1e30)
    with pytest.raises(ValueError):
        dollars_to_cents(Decimal("1E+40"))
