"""
Module: lp_kernel.models.lp_token_event
Responsibility: ORM persistence for the append-only LP token ledger -- one
    row per mint or burn, the source every balance history is replayed from.
Architecture position: Kernel > Models.  May import from db/ and
    exceptions.py only.

Invariants enforced:
    - Append-only: the ORM before_update / before_delete listeners reject any
      modification of a persisted event.
    - amount is non-negative; the kind column carries the sign.
    - timestamp is timezone-aware UTC (UTCDateTime).

Failure modes:
    - ImmutabilityViolationError on any UPDATE or DELETE of an existing row.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Index, Numeric, String, event
from sqlalchemy.orm import Mapped, mapped_column

from lp_kernel.db.base import Base, UTCDateTime
from lp_kernel.db.types import AMOUNT_PRECISION, AMOUNT_SCALE
from lp_kernel.exceptions import ImmutabilityViolationError


class LPTokenEventKind(str, Enum):
    """Direction of a ledger event."""

    MINT = "mint"
    BURN = "burn"


class LPTokenEvent(Base):
    """
    Immutable mint/burn fact for one subject.

    Contract:
        Created once by LpTokenService at mint/burn time and never mutated
        or deleted afterwards.

    Guarantees:
        - (subject_id, timestamp) is indexed so a subject's stream can be
          read in ascending time order without a sort over the whole table.
    """

    __tablename__ = "lp_token_events"

    __table_args__ = (
        Index("idx_lp_event_subject_ts", "subject_id", "timestamp"),
        Index("idx_lp_event_kind_ts", "kind", "timestamp"),
        CheckConstraint("amount >= 0", name="ck_lp_event_amount_non_negative"),
    )

    subject_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(AMOUNT_PRECISION, AMOUNT_SCALE),
        nullable=False,
    )

    # "mint" or "burn"
    kind: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    # Provenance (transaction hash, token id, ...)
    reference: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<LPTokenEvent {self.kind} {self.amount} {self.subject_id}@{self.timestamp}>"


# =============================================================================
# ORM-Level Immutability Protection
# =============================================================================

@event.listens_for(LPTokenEvent, "before_update")
def prevent_lp_event_update(mapper, connection, target):
    """Reject any UPDATE flush of a ledger event."""
    raise ImmutabilityViolationError(
        f"LP token events are append-only - cannot modify event {target.id}",
        record_id=target.id,
    )


@event.listens_for(LPTokenEvent, "before_delete")
def prevent_lp_event_delete(mapper, connection, target):
    """Reject any DELETE flush of a ledger event."""
    raise ImmutabilityViolationError(
        f"LP token events are append-only - cannot delete event {target.id}",
        record_id=target.id,
    )
