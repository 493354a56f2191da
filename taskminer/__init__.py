"""
TaskMiner ledger.

Level, task-quota and referral-commission ledger for the TaskMiner
application: task completions, 3-tier commissions, balances and the
deposit/withdrawal request lifecycle.
"""

__version__ = "1.0.0"
