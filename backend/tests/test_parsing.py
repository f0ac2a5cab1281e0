from datetime import date, datetime
from decimal import Decimal

import pytest

from pharmacy_pos.core.parsing import (
    parse_date,
    parse_optional_decimal,
    parse_optional_text,
    parse_positive_quantity,
)


@pytest.mark.parametrize("value", ["2026-03-31", "1999-01-01", "2028-02-29"])
def test_iso_dates_come_back_unchanged(value):
    assert parse_date(value) == value


def test_iso_prefix_with_time_is_truncated():
    assert parse_date("2026-03-31T00:00:00Z") == "2026-03-31"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("31 Mar 2026", "2026-03-31"),
        ("March 31, 2026", "2026-03-31"),
        ("03/31/2026", "2026-03-31"),
        (date(2026, 3, 31), "2026-03-31"),
        (datetime(2026, 3, 31, 18, 30), "2026-03-31"),
    ],
)
def test_other_formats_are_normalized(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    "value",
    ["not-a-date", "2026-13-45", "31/31/2026", 45000, 45000.5, None, "", "   ", "5", "12", "March", "Mar 2027", "31 March"],
)
def test_unparseable_dates_return_none(value):
    assert parse_date(value) is None


@pytest.mark.parametrize(
    "value, expected",
    [(5, 5), ("12", 12), ("3.9", 3), (2.7, 2), (" 7 ", 7)],
)
def test_quantity_truncates_toward_zero(value, expected):
    assert parse_positive_quantity(value) == expected


@pytest.mark.parametrize(
    "value", [0, "0.4", -3, "-1", "ten", "", None, True, float("nan"), float("inf"), "1e20", 2**31, "9" * 400]
)
def test_quantity_must_be_positive_number(value):
    assert parse_positive_quantity(value) is None


def test_optional_decimal():
    assert parse_optional_decimal("12.345") == Decimal("12.34")  # banker's rounding
    assert parse_optional_decimal(10) == Decimal("10.00")
    assert parse_optional_decimal("-4.5") == Decimal("-4.50")
    assert parse_optional_decimal("abc") is None
    assert parse_optional_decimal("NaN") is None
    assert parse_optional_decimal(None) is None


def test_optional_text():
    assert parse_optional_text("  B-12 ") == "B-12"
    assert parse_optional_text(42) == "42"
    assert parse_optional_text("   ") is None
    assert parse_optional_text(None) is None


def test_quantity_upper_limit():
    assert parse_positive_quantity(2**31 - 1) == 2**31 - 1
    assert parse_positive_quantity("2147483647.9") == 2**31 - 1


def test_prices_beyond_column_size_become_none():
    assert parse_optional_decimal("99999999.99") == Decimal("99999999.99")
    assert parse_optional_decimal("100000000") is None
    assert parse_optional_decimal("-1e8") is None
    assert parse_optional_decimal("99999999.999") is None
    assert parse_optional_decimal("1e400") is None
