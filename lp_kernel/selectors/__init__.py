"""Selectors for the LP kernel (read side)."""

from lp_kernel.selectors.holdings_selector import HoldingsSelector
from lp_kernel.selectors.ledger_event_selector import LedgerEventSelector

__all__ = [
    "LedgerEventSelector",
    "HoldingsSelector",
]
