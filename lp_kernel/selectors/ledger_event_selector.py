"""
Module: lp_kernel.selectors.ledger_event_selector
Responsibility: Read-only queries over the append-only LP token ledger.  This
    is the SQL EventStoreReader used by the balance history orchestrator, plus
    the paginated event listing.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - fetch_events() returns events in ascending timestamp order.  The
      replayer relies on this and never re-sorts.
    - Range bounds are inclusive on both ends.
    - No stored balances are read here; balances are always replayed.

Failure modes:
    - StoreUnavailableError when the database cannot be reached.
    - InvalidPaginationError for page or limit below 1.
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lp_kernel.domain.dtos import EventKind, EventPage, LedgerEvent
from lp_kernel.exceptions import InvalidPaginationError
from lp_kernel.models.lp_token_event import LPTokenEvent
from lp_kernel.selectors.base import BaseSelector


class LedgerEventSelector(BaseSelector[LPTokenEvent]):
    """
    Selector for LP token ledger events.

    Contract:
        Implements the EventStoreReader port.  Results are LedgerEvent DTOs.

    Non-goals:
        - Does NOT aggregate balances; see lp_kernel.domain.replay.
    """

    store_name = "lp_token_events"

    def __init__(self, session: Session):
        super().__init__(session)

    def fetch_events(
        self,
        subject_id: str,
        from_instant: datetime | None = None,
        to_instant: datetime | None = None,
    ) -> list[LedgerEvent]:
        """
        All events for ``subject_id`` ordered ascending by timestamp.

        Args:
            subject_id: Subject whose stream to read.
            from_instant: Optional inclusive lower bound.
            to_instant: Optional inclusive upper bound.

        Returns:
            List of LedgerEvent DTOs (possibly empty).
        """
        query = select(LPTokenEvent).where(LPTokenEvent.subject_id == subject_id)

        if from_instant is not None:
            query = query.where(LPTokenEvent.timestamp >= from_instant)

        if to_instant is not None:
            query = query.where(LPTokenEvent.timestamp <= to_instant)

        query = query.order_by(LPTokenEvent.timestamp.asc())

        with self._reading():
            rows = self.session.execute(query).scalars().all()

        return [LedgerEvent.from_model(row) for row in rows]

    def query_events(
        self,
        kind: EventKind | str | None = None,
        subject_id: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> EventPage:
        """
        Paginated event listing, newest first.

        Args:
            kind: Optional "mint" / "burn" filter.
            subject_id: Optional subject filter.
            from_date: Optional inclusive lower bound.
            to_date: Optional inclusive upper bound.
            page: 1-based page number.
            limit: Page size.

        Raises:
            InvalidPaginationError: If page or limit is below 1.
        """
        if page < 1 or limit < 1:
            raise InvalidPaginationError(page, limit)

        conditions = []
        if kind is not None:
            conditions.append(LPTokenEvent.kind == EventKind(kind).value)
        if subject_id is not None:
            conditions.append(LPTokenEvent.subject_id == subject_id)
        if from_date is not None:
            conditions.append(LPTokenEvent.timestamp >= from_date)
        if to_date is not None:
            conditions.append(LPTokenEvent.timestamp <= to_date)

        count_query = select(func.count()).select_from(LPTokenEvent).where(*conditions)
        page_query = (
            select(LPTokenEvent)
            .where(*conditions)
            .order_by(LPTokenEvent.timestamp.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        with self._reading():
            total = self.session.execute(count_query).scalar_one()
            rows = self.session.execute(page_query).scalars().all()

        return EventPage(
            items=tuple(LedgerEvent.from_model(row) for row in rows),
            total=total,
            page=page,
            limit=limit,
        )
