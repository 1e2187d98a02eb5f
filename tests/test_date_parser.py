"""Tests for date parsing utilities."""

import pytest
from datetime import date
from ledgersync.utils.date_parser import parse_date, recent_months


def test_parse_iso_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_slash_date():
    """Test parsing the Money Forward date format."""
    assert parse_date("2024/01/05") == date(2024, 1, 5)


def test_parse_timestamp_keeps_date():
    """Test that timestamps are reduced to their calendar date."""
    assert parse_date("2024-01-15 23:59:59") == date(2024, 1, 15)


@pytest.mark.parametrize("value", ["", "   ", None, "not a date", "2024-13-45"])
def test_parse_invalid(value):
    """Test invalid dates raise ValueError."""
    with pytest.raises(ValueError):
        parse_date(value)


def test_recent_months_counts_back_from_today():
    """Test month list starts with the current month."""
    months = recent_months(3, today=date(2024, 2, 20))
    assert months == [date(2024, 2, 1), date(2024, 1, 1), date(2023, 12, 1)]


def test_recent_months_zero():
    assert recent_months(0, today=date(2024, 2, 20)) == []
