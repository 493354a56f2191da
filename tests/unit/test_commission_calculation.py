"""
Unit tests for commission calculation.
"""

from decimal import Decimal

import pytest

from taskminer.config.business_constants import COMMISSION_RATES, REFERRAL_DEPTH
from taskminer.services.referral.commission_distributor import (
    calculate_commission,
)


class TestCommissionRates:
    """Test commission configuration."""

    def test_three_tiers(self):
        """Test 3-tier program."""
        assert REFERRAL_DEPTH == 3
        assert sorted(COMMISSION_RATES) == [1, 2, 3]

    def test_rates(self):
        """Test 3% / 2% / 1%."""
        assert COMMISSION_RATES[1] == Decimal("0.03")
        assert COMMISSION_RATES[2] == Decimal("0.02")
        assert COMMISSION_RATES[3] == Decimal("0.01")


class TestCalculateCommission:
    """Test per-tier commission amounts."""

    @pytest.mark.parametrize(
        "reward,tier,expected",
        [
            (Decimal("1"), 1, Decimal("0.03")),
            (Decimal("1"), 2, Decimal("0.02")),
            (Decimal("1"), 3, Decimal("0.01")),
            (Decimal("0.5"), 1, Decimal("0.015")),
            (Decimal("0.4"), 3, Decimal("0.004")),
            (Decimal("4"), 2, Decimal("0.08")),
        ],
    )
    def test_tier_amount(self, reward, tier, expected):
        """Test reward times tier rate."""
        assert calculate_commission(reward, tier) == expected

    def test_no_rate_beyond_depth(self):
        """Test tiers beyond the program pay nothing."""
        assert calculate_commission(Decimal("1"), 4) == Decimal("0")

    def test_conservation(self):
        """Test the three tiers pay 6% of the reward in total."""
        reward = Decimal("2")
        total = sum(calculate_commission(reward, tier) for tier in (1, 2, 3))
        assert total == reward * Decimal("0.06")

    def test_truncated_to_storage_precision(self):
        """Test sub-precision remainders are dropped."""
        assert calculate_commission(Decimal("0.00000001"), 1) == Decimal("0")
