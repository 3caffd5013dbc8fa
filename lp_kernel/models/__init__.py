"""ORM models for the LP kernel."""

from lp_kernel.models.lp_token import LPToken
from lp_kernel.models.lp_token_event import LPTokenEvent, LPTokenEventKind

__all__ = [
    "LPToken",
    "LPTokenEvent",
    "LPTokenEventKind",
]
