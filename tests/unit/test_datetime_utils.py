"""
Unit tests for datetime utilities.
"""

from datetime import UTC, date, datetime

import pytest

from agencyops.utils.datetime_utils import (
    month_bounds,
    month_datetime_bounds,
    parse_month,
    period_bounds,
    to_date,
    utc_now,
)
from agencyops.utils.exceptions import ValidationError


class TestMonths:
    """Test month parsing and bounds."""

    def test_parse_month(self):
        assert parse_month("2026-03") == (2026, 3)

    @pytest.mark.parametrize("month", ["2026-00", "2026-13", "2026/03", None])
    def test_invalid_month(self, month):
        with pytest.raises(ValidationError):
            parse_month(month)

    def test_leap_february(self):
        assert month_bounds("2028-02") == (date(2028, 2, 1), date(2028, 2, 29))

    def test_datetime_bounds_cover_whole_month(self):
        start, end = month_datetime_bounds("2026-04")

        assert start == datetime(2026, 4, 1, tzinfo=UTC)
        assert end.date() == date(2026, 4, 30)
        assert end.hour == 23 and end.minute == 59

    @pytest.mark.parametrize(
        "month,first,last",
        [
            ("2026-01", date(2026, 1, 1), date(2026, 3, 31)),
            ("2026-05", date(2026, 4, 1), date(2026, 6, 30)),
            ("2026-12", date(2026, 10, 1), date(2026, 12, 31)),
        ],
    )
    def test_quarter_bounds(self, month, first, last):
        start, end = period_bounds(month, "quarterly")

        assert start.date() == first
        assert end.date() == last

    def test_monthly_period(self):
        assert period_bounds("2026-05", "monthly") == month_datetime_bounds("2026-05")


class TestConversions:
    """Test date coercion."""

    def test_to_date(self):
        assert to_date(datetime(2026, 3, 5, 22, tzinfo=UTC)) == date(2026, 3, 5)
        assert to_date(date(2026, 3, 5)) == date(2026, 3, 5)
        assert to_date("2026-03-05") == date(2026, 3, 5)
        assert to_date(None) is None

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is UTC
