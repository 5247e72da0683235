"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from farmledger.utils.date_parser import PERIODS, parse_date, get_date_range, year_range


def _quarter_start(day: date) -> date:
    return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("January 15, 2024", date(2024, 1, 15)),
        ("15/01/2024", date(2024, 1, 15)),
        ("  2024-02-29 ", date(2024, 2, 29)),
    ],
)
def test_parse_absolute_dates(text, expected):
    """Test parsing absolute dates in several formats."""
    assert parse_date(text) == expected


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("Today") == date.today()


def test_parse_yesterday_and_tomorrow():
    """Test parsing 'yesterday' and 'tomorrow'."""
    assert parse_date("yesterday") == date.today() - timedelta(days=1)
    assert parse_date("tomorrow") == date.today() + timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    # First day of last month
    expected = date.today().replace(day=1) - relativedelta(months=1)
    assert parse_date("last month") == expected


def test_parse_this_and_next_year():
    """Test parsing 'this year' and 'next year'."""
    today = date.today()
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("next year") == date(today.year + 1, 1, 1)


def test_parse_quarters():
    """Test parsing quarter-relative dates."""
    start = _quarter_start(date.today())
    assert parse_date("this quarter") == start
    assert parse_date("last quarter") == start - relativedelta(months=3)
    assert parse_date("next quarter") == start + relativedelta(months=3)


def test_parse_last_week_is_a_monday():
    """Test parsing 'last week'."""
    result = parse_date("last week")
    today = date.today()
    assert result == today - timedelta(days=today.weekday() + 7)
    assert result.weekday() == 0


def test_parse_last_weekday():
    """Test parsing 'last monday' and friends."""
    today = date.today()
    for name in ("monday", "friday"):
        result = parse_date(f"last {name}")
        assert result < today
        assert today - result <= timedelta(days=7)
        assert result.strftime("%A").lower() == name


@pytest.mark.parametrize("text", ["someday", "2024-13-45", "last fortnight"])
def test_parse_invalid_date(text):
    """Test that unparseable input raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date(text)


def test_this_periods_end_today():
    """Test that 'this-*' ranges run from the period start to today."""
    today = date.today()
    assert get_date_range("this-month") == (today.replace(day=1), today)
    assert get_date_range("this-quarter") == (_quarter_start(today), today)
    assert get_date_range("this-year") == (date(today.year, 1, 1), today)


def test_last_periods_are_complete():
    """Test that 'last-*' ranges cover the whole previous period."""
    today = date.today()

    start, end = get_date_range("last-month")
    assert start == today.replace(day=1) - relativedelta(months=1)
    assert end == today.replace(day=1) - timedelta(days=1)

    start, end = get_date_range("last-quarter")
    assert start == _quarter_start(today) - relativedelta(months=3)
    assert end == _quarter_start(today) - timedelta(days=1)

    assert get_date_range("LAST-YEAR") == (date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))


def test_every_period_is_ordered():
    """Test that every named period starts on or before it ends."""
    for period in PERIODS:
        start, end = get_date_range(period)
        assert start <= end


def test_unknown_period():
    """Test that an unknown period is rejected."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-month")


def test_year_range():
    """Test the calendar year range."""
    assert year_range(2024) == (date(2024, 1, 1), date(2024, 12, 31))
