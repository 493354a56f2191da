"""
Business constants.

Single source of truth for commission rates, withdrawal limits,
VIP requirements and contract time bonuses.
"""

from decimal import Decimal

# 3-level referral program: commission is a share of the downline task reward
REFERRAL_DEPTH = 3
COMMISSION_RATES: dict[int, Decimal] = {
    1: Decimal("0.03"),  # 3% for level 1 (direct invitees)
    2: Decimal("0.02"),  # 2% for level 2
    3: Decimal("0.01"),  # 1% for level 3
}

# Hard cap for any walk over invited_by edges
MAX_TREE_DEPTH = 64

# Withdrawals
MIN_WITHDRAWAL = Decimal("20")

# VIP requirements - number of LV1+ direct invitees needed, by current level
VIP_REQUIREMENTS: dict[int, int] = {
    0: 1,
    1: 2,
    2: 3,
    3: 4,
    4: 5,
}
VIP_TEAM_MIN_LEVEL = 1

# Contract
CONTRACT_DURATION_DAYS = 365

# Time bonuses by months worked (USDT), keyed by months then by level
TIME_BONUSES: dict[int, dict[int, Decimal]] = {
    2: {1: Decimal("300"), 2: Decimal("400"), 3: Decimal("500"), 4: Decimal("500")},
    5: {1: Decimal("600"), 2: Decimal("800"), 3: Decimal("1000"), 4: Decimal("1200")},
    8: {1: Decimal("1500"), 2: Decimal("2000"), 3: Decimal("2500"), 4: Decimal("3000")},
    12: {1: Decimal("3500"), 2: Decimal("4200"), 3: Decimal("6000"), 4: Decimal("7500")},
}
