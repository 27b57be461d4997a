"""
Payment Ledger

Applies a log of client deposits, withdrawals and disputes to per-client
accounts using exact Decimal arithmetic and reports the final balances.
"""

__version__ = "1.0.0"
