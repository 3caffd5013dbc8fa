"""
Module: lp_kernel.models.lp_token
Responsibility: ORM persistence for current LP token holdings -- the
    materialized view the current-balance oracle sums over.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - token_id is globally unique.
    - amount is positive while the row exists; a fully burned holding is
      deleted by LpTokenService rather than kept at zero.

Failure modes:
    - IntegrityError on duplicate token_id.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from lp_kernel.db.base import Base, UTCDateTime
from lp_kernel.db.types import AMOUNT_PRECISION, AMOUNT_SCALE


class LPToken(Base):
    """A subject's position in one pool, identified by token_id."""

    __tablename__ = "lp_tokens"

    __table_args__ = (
        Index("idx_lp_token_subject", "subject_id"),
    )

    subject_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    pool_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(AMOUNT_PRECISION, AMOUNT_SCALE),
        nullable=False,
    )

    minted_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    token_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<LPToken {self.token_id} pool={self.pool_id} {self.amount}>"
