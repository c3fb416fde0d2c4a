"""Tests for date and amount helpers."""

import pytest
from datetime import date, time, timedelta
from decimal import Decimal
from dateutil.relativedelta import relativedelta

from cnabledger.utils.amount_parser import cents_to_amount, format_amount, parse_cents
from cnabledger.utils.date_parser import (
    get_date_range,
    parse_compact_date,
    parse_compact_time,
    parse_date,
)


def test_parse_compact_date():
    assert parse_compact_date("20190301") == date(2019, 3, 1)


@pytest.mark.parametrize("value", ["2019031", "20190230", "2019-3-1", "２０１９０３０１"])
def test_parse_compact_date_invalid(value):
    with pytest.raises(ValueError):
        parse_compact_date(value)


def test_parse_compact_time():
    assert parse_compact_time("235959") == time(23, 59, 59)
    with pytest.raises(ValueError):
        parse_compact_time("240000")


def test_parse_cents():
    assert parse_cents("0000014200") == 14200
    assert parse_cents("0000000000") == 0
    for bad in ["", " 000001420", "+000001420", "1,2"]:
        with pytest.raises(ValueError):
            parse_cents(bad)


def test_cents_to_amount_and_format():
    assert cents_to_amount(-10250) == Decimal("-102.50")
    assert format_amount(Decimal("1234.5")) == "R$ 1,234.50"
    assert format_amount(cents_to_amount(-22900)) == "R$ -229.00"


def test_parse_date_absolute_and_relative():
    today = date.today()
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("today") == today
    assert parse_date("yesterday") == today - timedelta(days=1)
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("last month") == (today - relativedelta(months=1)).replace(day=1)


def test_parse_date_invalid():
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_get_date_range():
    today = date.today()
    assert get_date_range("this-year") == (today.replace(month=1, day=1), today)
    start, end = get_date_range("last-month")
    assert start.day == 1
    assert end == today.replace(day=1) - timedelta(days=1)
    with pytest.raises(ValueError):
        get_date_range("next-decade")
