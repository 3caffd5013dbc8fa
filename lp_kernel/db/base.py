"""
Module: lp_kernel.db.base
Responsibility: Declarative base for the LP kernel ORM models plus the two
    column types every table relies on: string-stored UUIDs and UTC-only
    timestamps.
Architecture position: Kernel > DB.  Lowest import target inside the
    kernel; MUST NOT import from models/, services/, selectors/, domain/.

Invariants enforced:
    - Every row has a uuid4 primary key stored as String(36), so the schema
      is identical on PostgreSQL and SQLite.
    - Decimal annotations map to Numeric(18, 8); token amounts are never
      floats.
    - Timestamps are written as UTC and read back timezone-aware in UTC,
      including on SQLite, which stores no offset at all.

Failure modes:
    - IntegrityError on a duplicate primary key.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from lp_kernel.db.types import AMOUNT_PRECISION, AMOUNT_SCALE


class UUIDString(TypeDecorator):
    """UUID column stored as its 36-character text form."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else PyUUID(value)


class UTCDateTime(TypeDecorator):
    """
    Timestamp column that only ever holds UTC.

    Contract:
        A naive value is taken to be UTC on the way in.  Values coming back
        are always aware and in UTC, so comparing a stored event time with a
        bucket boundary never mixes naive and aware datetimes.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    @staticmethod
    def _to_utc(value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_bind_param(self, value, dialect):
        return self._to_utc(value)

    def process_result_value(self, value, dialect):
        return self._to_utc(value)


class Base(DeclarativeBase):
    """
    Declarative base for all kernel models.

    Guarantees:
        - ``id`` defaults to uuid4().
        - Annotation map: Decimal -> Numeric(18, 8), datetime -> UTCDateTime,
          UUID -> UUIDString, int -> BigInteger.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(AMOUNT_PRECISION, AMOUNT_SCALE),
        datetime: UTCDateTime(),
        PyUUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


UUID = PyUUID
