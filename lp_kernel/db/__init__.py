"""Database layer - engine, base classes, and types."""

from lp_kernel.db.base import UUID, Base, UTCDateTime, UUIDString
from lp_kernel.db.engine import create_tables, get_engine, get_session, session_scope
from lp_kernel.db.types import format_amount, round_amount

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "UTCDateTime",
    "UUIDString",
    "UUID",
    "round_amount",
    "format_amount",
]
