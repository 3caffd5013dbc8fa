"""
LedgerEventSelector tests.

Verifies:
- fetch_events returns one subject's events in ascending timestamp order
- Range bounds are inclusive on both ends
- query_events filters, orders newest first, and paginates
- Connectivity failures surface as StoreUnavailableError
"""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from lp_kernel.domain.dtos import EventKind
from lp_kernel.exceptions import InvalidPaginationError, StoreUnavailableError
from lp_kernel.selectors.ledger_event_selector import LedgerEventSelector
from tests.support import utc


@pytest.fixture
def selector(session):
    return LedgerEventSelector(session)


@pytest.fixture
def ledger(add_ledger_event):
    """Three events for user-1 (inserted out of order) and one for user-2."""
    add_ledger_event("user-1", "50", "mint", utc(2025, 1, 2))
    add_ledger_event("user-1", "100", "mint", utc(2025, 1, 1), reference="0xfirst")
    add_ledger_event("user-1", "25", "burn", utc(2025, 1, 3))
    add_ledger_event("user-2", "999", "mint", utc(2025, 1, 2))


class TestFetchEvents:

    def test_ascending_order(self, selector, ledger):
        events = selector.fetch_events("user-1")

        assert [e.timestamp for e in events] == [utc(2025, 1, 1), utc(2025, 1, 2), utc(2025, 1, 3)]
        assert [e.kind for e in events] == [EventKind.MINT, EventKind.MINT, EventKind.BURN]
        assert events[0].amount == Decimal("100")
        assert events[0].reference == "0xfirst"

    def test_only_requested_subject(self, selector, ledger):
        assert {e.subject_id for e in selector.fetch_events("user-2")} == {"user-2"}

    def test_bounds_inclusive(self, selector, ledger):
        events = selector.fetch_events("user-1", utc(2025, 1, 2), utc(2025, 1, 3))
        assert [e.timestamp for e in events] == [utc(2025, 1, 2), utc(2025, 1, 3)]

    def test_lower_bound_only(self, selector, ledger):
        events = selector.fetch_events("user-1", from_instant=utc(2025, 1, 3))
        assert len(events) == 1

    def test_unknown_subject_is_empty(self, selector, ledger):
        assert selector.fetch_events("nobody") == []

    def test_timestamps_are_aware_utc(self, selector, ledger):
        for event in selector.fetch_events("user-1"):
            assert event.timestamp.utcoffset().total_seconds() == 0


class TestQueryEvents:

    def test_newest_first(self, selector, ledger):
        page = selector.query_events(subject_id="user-1")

        assert page.total == 3
        assert [e.timestamp for e in page.items] == [utc(2025, 1, 3), utc(2025, 1, 2), utc(2025, 1, 1)]

    def test_kind_filter(self, selector, ledger):
        page = selector.query_events(kind="burn")
        assert page.total == 1
        assert page.items[0].kind is EventKind.BURN

    def test_date_filter(self, selector, ledger):
        page = selector.query_events(from_date=utc(2025, 1, 2), to_date=utc(2025, 1, 2))
        assert page.total == 2
        assert {e.subject_id for e in page.items} == {"user-1", "user-2"}

    def test_pagination(self, selector, ledger):
        first = selector.query_events(page=1, limit=3)
        second = selector.query_events(page=2, limit=3)

        assert first.total == second.total == 4
        assert len(first.items) == 3
        assert len(second.items) == 1
        assert first.total_pages == 2

    def test_page_past_end_is_empty(self, selector, ledger):
        page = selector.query_events(page=9, limit=3)
        assert page.items == ()
        assert page.total == 4

    @pytest.mark.parametrize("page, limit", [(0, 20), (1, 0), (-1, -1)])
    def test_invalid_pagination(self, selector, page, limit):
        with pytest.raises(InvalidPaginationError):
            selector.query_events(page=page, limit=limit)


class _BrokenSession:
    """Session stand-in whose every query fails at the driver."""

    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionError("connection refused"))


class TestStoreUnavailable:

    def test_fetch_events_translated(self):
        selector = LedgerEventSelector(_BrokenSession())

        with pytest.raises(StoreUnavailableError) as exc_info:
            selector.fetch_events("user-1")

        assert exc_info.value.store == "lp_token_events"
        assert "connection refused" in exc_info.value.detail
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_query_events_translated(self):
        with pytest.raises(StoreUnavailableError):
            LedgerEventSelector(_BrokenSession()).query_events()
