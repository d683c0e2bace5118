"""Tests for parsing and formatting helpers."""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from fintrack.utils.formatting import format_currency
from fintrack.utils.timestamp import add_months, parse_date, parse_timestamp


@pytest.mark.parametrize("raw", [
    "2024-01-02T09:10:00Z",
    "2024-01-02T09:10:00+00:00",
    "2024-01-02T09:10:00",
    "2024-01-02 09:10:00",
])
def test_parse_timestamp_formats(raw):
    assert parse_timestamp(raw) == datetime(2024, 1, 2, 9, 10, tzinfo=timezone.utc)


def test_parse_timestamp_plain_date():
    assert parse_timestamp("2024-01-02") == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("yesterday")
    with pytest.raises(ValueError):
        parse_timestamp("  ")


def test_parse_date():
    assert parse_date("2024-03-31") == date(2024, 3, 31)
    assert parse_date(datetime(2024, 3, 31, 23, 0)) == date(2024, 3, 31)


@pytest.mark.parametrize("start, months, expected", [
    (date(2024, 1, 15), 1, date(2024, 2, 15)),
    (date(2024, 1, 31), 1, date(2024, 2, 29)),
    (date(2024, 12, 10), 1, date(2025, 1, 10)),
    (date(2024, 3, 1), -3, date(2023, 12, 1)),
])
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected


def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(Decimal("-12.345")) == "-$12.35"
    assert format_currency(None) == "$0.00"
    assert format_currency(3, currency="CHF") == "3.00 CHF"
