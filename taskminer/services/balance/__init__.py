"""
Balance services package.

- ledger: atomic credit/debit of profile balance fields
"""

from taskminer.services.balance.ledger import BalanceLedger, BalanceSnapshot


__all__ = [
    "BalanceLedger",
    "BalanceSnapshot",
]
