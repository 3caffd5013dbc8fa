"""
LpTokenService -- mint and burn LP tokens.

Responsibility:
    The write side of the kernel.  Every mint creates a holding and appends a
    ``mint`` event; every burn decrements (or removes) a holding and appends
    a ``burn`` event.  Holding change and ledger event are flushed in the
    caller's transaction, so the live holdings and the replayable ledger
    move together.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - Amounts are positive Decimals quantized to 8 fractional digits.
    - A burn never takes a holding below zero; a holding that reaches zero
      is deleted.
    - Ledger events are append-only; this service only ever inserts them.
    - A burn locks the holding row (SELECT ... FOR UPDATE) before checking
      and decrementing it, so concurrent burns of one token serialize.
    - Flush only; the caller commits (see services/base.py).

Failure modes:
    - InvalidAmountError for zero, negative, float or non-numeric amounts.
    - TokenNotFoundError, UnauthorizedBurnError, InsufficientBalanceError
      on burn.
"""

from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from lp_kernel.db.types import ZERO, round_amount, to_amount
from lp_kernel.domain.clock import Clock, SystemClock
from lp_kernel.domain.dtos import BurnResult, HoldingDTO, LedgerEvent, MintResult
from lp_kernel.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    TokenNotFoundError,
    UnauthorizedBurnError,
)
from lp_kernel.logging_config import LogContext, get_logger
from lp_kernel.models.lp_token import LPToken
from lp_kernel.models.lp_token_event import LPTokenEvent, LPTokenEventKind
from lp_kernel.services.base import BaseService

logger = get_logger("services.lp_token")


class LpTokenService(BaseService[LPToken]):
    """
    Service for minting and burning LP tokens.

    Usage:
        with session_scope() as session:
            result = LpTokenService(session, clock).mint("user-1", 7, "100")
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def mint(
        self,
        subject_id: str,
        pool_id: int,
        amount,
        reference: str | None = None,
    ) -> MintResult:
        """
        Mint ``amount`` LP tokens of ``pool_id`` to ``subject_id``.

        Postconditions:
            - A new LPToken row with a fresh token_id exists.
            - A ``mint`` LPTokenEvent referencing the token (or ``reference``
              when given) has been appended.

        Raises:
            InvalidAmountError: If amount is not a positive decimal.
        """
        value = self._positive_amount(amount)
        now = self._clock.now_utc()
        token_id = str(uuid4())

        token = LPToken(
            subject_id=subject_id,
            pool_id=pool_id,
            amount=value,
            minted_at=now,
            token_id=token_id,
        )
        ledger_row = LPTokenEvent(
            subject_id=subject_id,
            amount=value,
            kind=LPTokenEventKind.MINT.value,
            timestamp=now,
            reference=reference or token_id,
        )
        self.session.add_all([token, ledger_row])
        self.session.flush()

        with LogContext.bind(subject_id=subject_id):
            logger.info(
                "lp_token_minted",
                extra={"token_id": token_id, "pool_id": pool_id, "amount": value},
            )

        return MintResult(
            holding=HoldingDTO.from_model(token),
            event=LedgerEvent.from_model(ledger_row),
        )

    def burn(self, subject_id: str, token_id: str, amount) -> BurnResult:
        """
        Burn ``amount`` from the holding ``token_id`` owned by ``subject_id``.

        Postconditions:
            - The holding is decremented, or deleted when it reaches zero.
            - A ``burn`` LPTokenEvent referencing token_id has been appended.

        Raises:
            InvalidAmountError: If amount is not a positive decimal.
            TokenNotFoundError: If no holding has this token_id.
            UnauthorizedBurnError: If the holding belongs to another subject.
            InsufficientBalanceError: If amount exceeds the holding.
        """
        value = self._positive_amount(amount)

        token = self.session.execute(
            select(LPToken).where(LPToken.token_id == token_id).with_for_update()
        ).scalar_one_or_none()

        if token is None:
            raise TokenNotFoundError(token_id)
        if token.subject_id != subject_id:
            raise UnauthorizedBurnError(token_id, subject_id)

        held = Decimal(token.amount)
        if held < value:
            raise InsufficientBalanceError(token_id, held, value)

        remaining = round_amount(held - value)
        now = self._clock.now_utc()

        ledger_row = LPTokenEvent(
            subject_id=subject_id,
            amount=value,
            kind=LPTokenEventKind.BURN.value,
            timestamp=now,
            reference=token_id,
        )
        self.session.add(ledger_row)

        fully_burned = remaining == ZERO
        if fully_burned:
            self.session.delete(token)
        else:
            token.amount = remaining
        self.session.flush()

        with LogContext.bind(subject_id=subject_id):
            logger.info(
                "lp_token_burned",
                extra={
                    "token_id": token_id,
                    "amount": value,
                    "remaining": remaining,
                    "fully_burned": fully_burned,
                },
            )

        return BurnResult(
            token_id=token_id,
            burned=value,
            remaining=remaining,
            event=LedgerEvent.from_model(ledger_row),
            fully_burned=fully_burned,
        )

    @staticmethod
    def _positive_amount(amount) -> Decimal:
        value = to_amount(amount)
        if value <= ZERO:
            raise InvalidAmountError(amount)
        rounded = round_amount(value)
        if rounded != value:
            # More than 8 fractional digits cannot be stored exactly
            raise InvalidAmountError(amount)
        return rounded
