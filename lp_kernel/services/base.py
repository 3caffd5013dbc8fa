"""
BaseService -- abstract base for kernel services that write.

Responsibility:
    Provides the common constructor and session-handling contract for
    write-side services.  Concrete services receive a SQLAlchemy ``Session``
    that they use via ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Transaction boundaries: services flush within the caller's
      transaction and never commit or rollback themselves.  The caller
      (session_scope(), the CLI, or a test harness) owns commit/rollback,
      so a holding change and its ledger event land atomically.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from lp_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for write-side kernel services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide query-only (read) methods -- those belong
          in ``lp_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
