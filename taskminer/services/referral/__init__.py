"""
Referral services package.

Contains modular services for the invite tree:
- tree: bounded ancestor/descendant queries
- commission_distributor: team commission on task rewards
- statistics: team report
"""

from taskminer.services.referral.commission_distributor import (
    CommissionCredit,
    CommissionDistributor,
    DistributionResult,
    calculate_commission,
)
from taskminer.services.referral.statistics import (
    TeamReport,
    TeamStatistics,
    TierSummary,
)
from taskminer.services.referral.tree import ReferralTree


__all__ = [
    "ReferralTree",
    # Commission
    "CommissionCredit",
    "CommissionDistributor",
    "DistributionResult",
    "calculate_commission",
    # Statistics
    "TeamReport",
    "TeamStatistics",
    "TierSummary",
]
