"""
Module: lp_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.  Selectors
    form the "Q" side of the kernel, providing structured read access to the
    LP token ledger and holdings without mutation capability.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/dtos.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: Selectors accept a Session from the caller but MUST NOT
      call session.add(), session.delete(), session.commit(), or session.flush().
    - DTO return convention: Selectors return frozen dataclasses or computed
      results, NOT raw ORM model instances.
    - Session ownership: the caller owns the session and its transaction.

Failure modes:
    - StoreUnavailableError when the database cannot be reached
      (OperationalError / InterfaceError are translated, chained via
      ``__cause__``).  Other SQLAlchemy errors propagate unchanged.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from lp_kernel.db.base import Base
from lp_kernel.exceptions import StoreUnavailableError
from lp_kernel.logging_config import get_logger

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger("selectors")


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return DTOs or computed results.  They MUST NOT mutate any data.
    """

    store_name: str = "store"

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _reading(self) -> Iterator[None]:
        """Translate connectivity failures into StoreUnavailableError."""
        try:
            yield
        except (OperationalError, InterfaceError) as exc:
            logger.error(
                "store_unavailable",
                extra={"store": self.store_name, "error": str(exc.orig or exc)},
            )
            raise StoreUnavailableError(self.store_name, str(exc.orig or exc)) from exc
