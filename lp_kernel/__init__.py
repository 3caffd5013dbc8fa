"""
LP Kernel - LP token ledger and balance history

An event-sourced, append-only LP token ledger with:
- Mint/burn events recorded alongside materialized holdings
- Balance history replay at daily, weekly or monthly granularity
- An independent current-balance oracle over live holdings
- Fixed-point (8 fractional digits) arithmetic throughout
"""

__version__ = "0.1.0"
