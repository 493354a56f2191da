"""
Services.

Business logic layer.
"""

from taskminer.services.admin_service import (
    AdminService,
    AdminTransactionView,
    AdminUserView,
)
from taskminer.services.balance import BalanceLedger, BalanceSnapshot
from taskminer.services.ledger_gateway import LedgerGateway
from taskminer.services.referral import (
    CommissionDistributor,
    DistributionResult,
    ReferralTree,
    TeamReport,
    TeamStatistics,
)
from taskminer.services.task import (
    TaskCompletionResult,
    TaskCompletionService,
    TaskProgress,
)
from taskminer.services.transaction import (
    TransactionLifecycleHandler,
    TransactionQueryService,
    TransactionRequestHandler,
)
from taskminer.services.user import (
    AuthContext,
    ContractService,
    ContractStatus,
    RegistrationService,
    VipService,
)


__all__ = [
    # Gateway
    "LedgerGateway",
    # Balance
    "BalanceLedger",
    "BalanceSnapshot",
    # Referral
    "CommissionDistributor",
    "DistributionResult",
    "ReferralTree",
    "TeamReport",
    "TeamStatistics",
    # Tasks
    "TaskCompletionResult",
    "TaskCompletionService",
    "TaskProgress",
    # Transactions
    "TransactionLifecycleHandler",
    "TransactionQueryService",
    "TransactionRequestHandler",
    # Users
    "AuthContext",
    "ContractService",
    "ContractStatus",
    "RegistrationService",
    "VipService",
    # Admin
    "AdminService",
    "AdminTransactionView",
    "AdminUserView",
]
