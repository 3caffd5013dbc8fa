"""Services for the LP kernel (write side and orchestration)."""

from lp_kernel.services.balance_history_service import BalanceHistoryService
from lp_kernel.services.lp_token_service import LpTokenService

__all__ = [
    "BalanceHistoryService",
    "LpTokenService",
]
