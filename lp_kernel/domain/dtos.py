"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that flow between the event store,
    the replayer, the oracle and callers: LedgerEvent (input fact),
    HoldingDTO (oracle input), BalancePoint and BalanceHistory (output),
    EventPage (paginated event listing), MintResult and BurnResult (write
    side outcomes).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods exist as boundary converters but are only
    invoked from selectors and services (never from domain logic).

Invariants enforced:
    - LedgerEvent.amount is a non-negative Decimal; kind carries the sign.
    - LedgerEvent.timestamp is an aware UTC datetime.
    - BalanceHistory.point_count == len(BalanceHistory.history).

Failure modes:
    - ValueError on LedgerEvent with a negative amount.
    - ValueError on BalanceHistory whose point_count disagrees with history.

Data flow:
    LPTokenEvent (ORM) -> LedgerEvent -> BalancePoint* -> BalanceHistory
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from lp_kernel.db.types import format_amount
from lp_kernel.domain.intervals import Granularity, as_utc, format_instant

if TYPE_CHECKING:
    from lp_kernel.models.lp_token import LPToken as LPTokenModel
    from lp_kernel.models.lp_token_event import LPTokenEvent as LPTokenEventModel


# Sentinel rendered for an open range start when the subject has no events
RANGE_START_UNAVAILABLE = "N/A"


class EventKind(str, Enum):
    """
    Direction of a ledger event.

    Guarantees:
        - MINT adds ``amount`` to the running balance, BURN subtracts it.
    """

    MINT = "mint"
    BURN = "burn"

    def signed(self, amount: Decimal) -> Decimal:
        """Return the amount with the sign this kind applies to a balance."""
        return amount if self is EventKind.MINT else -amount


@dataclass(frozen=True)
class LedgerEvent:
    """
    An immutable mint/burn fact for one subject.

    Contract:
        Produced by an EventStoreReader; consumed by the replayer.

    Guarantees:
        - amount >= 0 (validated in __post_init__)
        - timestamp is aware and in UTC
    """

    subject_id: str
    amount: Decimal
    kind: EventKind
    timestamp: datetime
    reference: str | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"LedgerEvent amount must be non-negative: {self.amount}")
        object.__setattr__(self, "kind", EventKind(self.kind))
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    @property
    def signed_amount(self) -> Decimal:
        return self.kind.signed(self.amount)

    @classmethod
    def from_model(cls, model: LPTokenEventModel) -> LedgerEvent:
        """Boundary converter from the ORM row."""
        return cls(
            subject_id=model.subject_id,
            amount=Decimal(model.amount),
            kind=EventKind(model.kind),
            timestamp=model.timestamp,
            reference=model.reference,
        )


@dataclass(frozen=True)
class HoldingDTO:
    """A current LP token position, as read by the oracle."""

    token_id: str
    subject_id: str
    pool_id: int
    amount: Decimal
    minted_at: datetime | None = None

    @classmethod
    def from_model(cls, model: LPTokenModel) -> HoldingDTO:
        return cls(
            token_id=model.token_id,
            subject_id=model.subject_id,
            pool_id=model.pool_id,
            amount=Decimal(model.amount),
            minted_at=model.minted_at,
        )


@dataclass(frozen=True)
class BalancePoint:
    """
    Running balance at a bucket start.

    ``balance`` is the fixed-point string (8 fractional digits) produced at
    emission time; ``balance_amount`` parses it back for arithmetic.
    """

    timestamp: datetime
    balance: str

    @property
    def balance_amount(self) -> Decimal:
        return Decimal(self.balance)

    def to_dict(self) -> dict[str, str]:
        return {"timestamp": format_instant(self.timestamp), "balance": self.balance}


@dataclass(frozen=True)
class BalanceHistory:
    """
    Result aggregate of a balance-history query.

    Contract:
        ``current_balance`` is always present, computed by the oracle from
        live holdings, even when ``history`` is empty.

    Guarantees:
        - point_count == len(history) (validated in __post_init__)
    """

    subject_id: str
    range_start: datetime | str
    range_end: datetime
    granularity: Granularity
    history: tuple[BalancePoint, ...]
    point_count: int
    current_balance: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "history", tuple(self.history))
        if self.point_count != len(self.history):
            raise ValueError(
                f"point_count {self.point_count} != len(history) {len(self.history)}"
            )

    @property
    def last_balance(self) -> Decimal | None:
        """Balance at the final bucket, or None for an empty history."""
        if not self.history:
            return None
        return self.history[-1].balance_amount

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON document returned by the balance-history query."""
        range_start = (
            self.range_start
            if isinstance(self.range_start, str)
            else format_instant(self.range_start)
        )
        return {
            "subjectId": self.subject_id,
            "rangeStart": range_start,
            "rangeEnd": format_instant(self.range_end),
            "granularity": self.granularity.value,
            "history": [point.to_dict() for point in self.history],
            "pointCount": self.point_count,
            "currentBalance": format_amount(self.current_balance),
        }


@dataclass(frozen=True)
class EventPage:
    """One page of ledger events, newest first."""

    items: tuple[LedgerEvent, ...]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.total else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [
                {
                    "subjectId": e.subject_id,
                    "amount": format_amount(e.amount),
                    "kind": e.kind.value,
                    "timestamp": format_instant(e.timestamp),
                    "reference": e.reference,
                }
                for e in self.items
            ],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


@dataclass(frozen=True)
class MintResult:
    """Outcome of a mint: the new holding and the appended ledger event."""

    holding: HoldingDTO
    event: LedgerEvent


@dataclass(frozen=True)
class BurnResult:
    """
    Outcome of a burn.

    ``remaining`` is the amount left on the token; when it reaches zero the
    holding has been removed and ``fully_burned`` is True.
    """

    token_id: str
    burned: Decimal
    remaining: Decimal
    event: LedgerEvent
    fully_burned: bool = field(default=False)
