"""
Module: lp_kernel.selectors.holdings_selector
Responsibility: Read-only queries over current LP token holdings.  This is the
    SQL HoldingsReader behind the current-balance oracle.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - current_balance() is computed from live holdings only, never from the
      event ledger, so it can cross-check a full replay.

Failure modes:
    - Returns Decimal("0") when the subject holds nothing.
    - StoreUnavailableError when the database cannot be reached.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from lp_kernel.domain.dtos import HoldingDTO
from lp_kernel.domain.replay import sum_holdings
from lp_kernel.models.lp_token import LPToken
from lp_kernel.selectors.base import BaseSelector


class HoldingsSelector(BaseSelector[LPToken]):
    """Selector for current LP token positions."""

    store_name = "lp_tokens"

    def __init__(self, session: Session):
        super().__init__(session)

    def fetch_current_holdings(self, subject_id: str) -> list[HoldingDTO]:
        """Every live position held by ``subject_id``, oldest first."""
        query = (
            select(LPToken)
            .where(LPToken.subject_id == subject_id)
            .order_by(LPToken.minted_at.asc())
        )
        with self._reading():
            rows = self.session.execute(query).scalars().all()
        return [HoldingDTO.from_model(row) for row in rows]

    def find_by_subject(self, subject_id: str) -> list[HoldingDTO]:
        """Alias used by the "my tokens" listing."""
        return self.fetch_current_holdings(subject_id)

    def current_balance(self, subject_id: str) -> Decimal:
        """Sum of live holdings for ``subject_id``; 0 when it holds nothing."""
        return sum_holdings(self.fetch_current_holdings(subject_id))
