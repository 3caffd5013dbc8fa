"""
Tests for BalanceHistoryQuery parsing of raw request parameters.
"""

from datetime import datetime, timedelta, timezone

import pytest

from lp_kernel.domain.intervals import Granularity
from lp_kernel.domain.query import BalanceHistoryQuery, parse_instant
from lp_kernel.exceptions import InvalidRangeError, UnknownGranularityError
from tests.support import utc


class TestParseInstant:

    def test_z_suffix(self):
        assert parse_instant("2025-01-01T00:00:00Z", field_name="startDate") == utc(2025, 1, 1)

    def test_milliseconds(self):
        assert parse_instant("2025-01-01T00:00:00.250Z", field_name="startDate") == utc(
            2025, 1, 1, 0, 0, 0, 250000
        )

    def test_offset_is_normalized(self):
        parsed = parse_instant("2025-01-01T02:00:00+02:00", field_name="startDate")
        assert parsed == utc(2025, 1, 1)
        assert parsed.utcoffset() == timedelta(0)

    def test_date_only_is_midnight_utc(self):
        assert parse_instant("2025-03-01", field_name="endDate") == utc(2025, 3, 1)

    def test_malformed_raises_invalid_range(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            parse_instant("yesterday", field_name="endDate")
        assert "endDate" in exc_info.value.reason
        assert exc_info.value.range_end == "yesterday"

    @pytest.mark.parametrize(
        "field_name, start, end",
        [
            ("fromDate", "bogus", None),
            ("toDate", None, "bogus"),
            ("startDate", "bogus", None),
        ],
    )
    def test_malformed_value_reported_on_its_bound(self, field_name, start, end):
        with pytest.raises(InvalidRangeError) as exc_info:
            parse_instant("bogus", field_name=field_name)
        assert exc_info.value.range_start == start
        assert exc_info.value.range_end == end

    def test_offset_past_year_9999_rejected(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            parse_instant("9999-12-31T23:00:00-05:00", field_name="endDate")
        assert exc_info.value.range_end == "9999-12-31T23:00:00-05:00"


class TestBalanceHistoryQuery:

    def test_all_parameters_absent(self):
        query = BalanceHistoryQuery.parse()
        assert query.start_date is None
        assert query.end_date is None
        assert query.interval is Granularity.DAILY

    def test_empty_strings_are_absent(self):
        query = BalanceHistoryQuery.parse(start_date="", end_date="", interval="")
        assert query == BalanceHistoryQuery()

    def test_full_query(self):
        query = BalanceHistoryQuery.parse(
            start_date="2025-01-01T00:00:00Z",
            end_date="2025-03-31T23:59:59Z",
            interval="monthly",
        )
        assert query.start_date == utc(2025, 1, 1)
        assert query.end_date == utc(2025, 3, 31, 23, 59, 59)
        assert query.interval is Granularity.MONTHLY

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidRangeError):
            BalanceHistoryQuery.parse(
                start_date="2025-02-01T00:00:00Z",
                end_date="2025-01-01T00:00:00Z",
            )

    def test_unknown_interval_rejected(self):
        with pytest.raises(UnknownGranularityError):
            BalanceHistoryQuery.parse(interval="yearly")

    def test_direct_construction_normalizes(self):
        query = BalanceHistoryQuery(
            start_date=datetime(2025, 1, 1),
            end_date=datetime(2025, 1, 1, 3, tzinfo=timezone(timedelta(hours=3))),
            interval="weekly",
        )
        assert query.start_date == utc(2025, 1, 1)
        assert query.end_date == utc(2025, 1, 1)
        assert query.interval is Granularity.WEEKLY

    def test_is_frozen(self):
        query = BalanceHistoryQuery()
        with pytest.raises(AttributeError):
            query.interval = Granularity.WEEKLY
