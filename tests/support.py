"""Shared test helpers: in-memory ports and ledger event builders."""

from datetime import datetime, timezone
from decimal import Decimal

from lp_kernel.domain.dtos import EventKind, HoldingDTO, LedgerEvent


def utc(*args) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


class FakeEventStore:
    """EventStoreReader over a list; records every call it receives."""

    def __init__(self, events=(), error: Exception | None = None):
        self.events = list(events)
        self.error = error
        self.calls: list[tuple] = []

    def fetch_events(self, subject_id, from_instant=None, to_instant=None):
        self.calls.append((subject_id, from_instant, to_instant))
        if self.error is not None:
            raise self.error
        return sorted(
            (
                e
                for e in self.events
                if e.subject_id == subject_id
                and (from_instant is None or e.timestamp >= from_instant)
                and (to_instant is None or e.timestamp <= to_instant)
            ),
            key=lambda e: e.timestamp,
        )


class FakeHoldings:
    """HoldingsReader over a list."""

    def __init__(self, holdings=(), error: Exception | None = None):
        self.holdings = list(holdings)
        self.error = error
        self.calls: list[str] = []

    def fetch_current_holdings(self, subject_id):
        self.calls.append(subject_id)
        if self.error is not None:
            raise self.error
        return [h for h in self.holdings if h.subject_id == subject_id]


def mint(subject_id: str, amount: str, timestamp: datetime) -> LedgerEvent:
    return LedgerEvent(subject_id, Decimal(amount), EventKind.MINT, timestamp)


def burn(subject_id: str, amount: str, timestamp: datetime) -> LedgerEvent:
    return LedgerEvent(subject_id, Decimal(amount), EventKind.BURN, timestamp)


def holding(subject_id: str, amount: str, token_id: str = "t-1") -> HoldingDTO:
    return HoldingDTO(token_id=token_id, subject_id=subject_id, pool_id=1, amount=Decimal(amount))
