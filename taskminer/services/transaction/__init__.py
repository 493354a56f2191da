"""
Transaction services package.

Contains modular services for deposits and withdrawals:
- request_handler: validated creation of pending requests
- lifecycle_handler: admin approval and rejection
- query_service: listings
"""

from taskminer.services.transaction.lifecycle_handler import (
    TransactionLifecycleHandler,
)
from taskminer.services.transaction.query_service import (
    TransactionQueryService,
)
from taskminer.services.transaction.request_handler import (
    TransactionRequestHandler,
)


__all__ = [
    "TransactionLifecycleHandler",
    "TransactionQueryService",
    "TransactionRequestHandler",
]
