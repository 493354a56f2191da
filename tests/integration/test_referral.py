"""
Integration tests for the referral tree and commission distribution.

Tests cover:
- Signup with an inviter code and tier-1 commission
- Commission conservation over a full chain
- Short chains
- Cycle termination
- Team report
"""

from decimal import Decimal

import pytest

from taskminer.services.referral.commission_distributor import (
    CommissionDistributor,
)
from taskminer.services.referral.statistics import TeamStatistics
from taskminer.services.referral.tree import ReferralTree
from taskminer.utils.exceptions import NotFoundError, ValidationError


async def build_chain(make_profile, names):
    """Create profiles where each one invites the next."""
    profiles = []
    inviter = None
    for name in names:
        inviter = await make_profile(name, inviter=inviter)
        profiles.append(inviter)
    return profiles


class TestSignupCommission:
    """Signup with an invite code, then earn."""

    @pytest.mark.asyncio
    async def test_tier_one_commission_only(
        self, gateway, make_profile, task_day
    ):
        """Test new invitee earns 1.0 and the inviter gets 0.03."""
        inviter = await make_profile("alice", level=1)

        profile = await gateway.register_user(
            "bob", invite_code=inviter.invite_code.lower()
        )
        assert profile.invited_by == inviter.id

        result = await gateway.complete_task("bob")

        assert result.reward == Decimal("1")
        assert result.commission.credits_count == 1
        assert result.commission.total_distributed == Decimal("0.03")

        bob = await gateway.get_balances("bob")
        alice = await gateway.get_balances("alice")

        assert bob.available_balance == Decimal("1")
        assert alice.level1_commission == Decimal("0.03")
        assert alice.total_commission == Decimal("0.03")
        assert alice.available_balance == Decimal("0.03")
        assert alice.total_balance == Decimal("0.03")
        assert alice.level2_commission == Decimal("0")
        assert alice.level3_commission == Decimal("0")


class TestCommissionDistribution:
    """Distribution over chains of different length."""

    @pytest.mark.asyncio
    async def test_conservation_over_full_chain(
        self, gateway, make_profile, task_day
    ):
        """Test tiers 1-3 receive 3% + 2% + 1% and tier 4 nothing."""
        await build_chain(make_profile, ["a", "b", "c", "d", "e"])

        result = await gateway.complete_task("e")

        assert result.commission.total_distributed == Decimal("0.06")
        assert [c.user_id for c in result.commission.credits] == ["d", "c", "b"]

        d = await gateway.get_balances("d")
        c = await gateway.get_balances("c")
        b = await gateway.get_balances("b")
        a = await gateway.get_balances("a")

        assert d.level1_commission == Decimal("0.03")
        assert c.level2_commission == Decimal("0.02")
        assert b.level3_commission == Decimal("0.01")
        assert a.total_commission == Decimal("0")
        assert (
            d.total_commission + c.total_commission + b.total_commission
            == Decimal("0.06")
        )

    @pytest.mark.asyncio
    async def test_no_inviter(self, session, make_profile):
        """Test a root user distributes nothing without error."""
        await make_profile("root")

        result = await CommissionDistributor(session).distribute(
            "root", Decimal("1")
        )

        assert result.credits == []
        assert result.total_distributed == Decimal("0")

    @pytest.mark.asyncio
    async def test_standalone_distribution(self, gateway, make_profile):
        """Test distributing out-of-band earnings in its own transaction."""
        await build_chain(make_profile, ["a", "b"])

        result = await gateway.distribute_team_commission("b", Decimal("10"))

        assert result.total_distributed == Decimal("0.3")
        a = await gateway.get_balances("a")
        assert a.level1_commission == Decimal("0.3")

    @pytest.mark.asyncio
    async def test_rejects_non_positive_reward(self, session, make_profile):
        """Test zero reward is invalid."""
        await make_profile("a")

        with pytest.raises(ValidationError):
            await CommissionDistributor(session).distribute("a", Decimal("0"))

    @pytest.mark.asyncio
    async def test_unknown_user(self, session):
        """Test distribution for a missing profile."""
        with pytest.raises(NotFoundError):
            await CommissionDistributor(session).distribute(
                "ghost", Decimal("1")
            )


class TestReferralTree:
    """Bounded tree walks."""

    @pytest.mark.asyncio
    async def test_ancestors_nearest_first(self, session, make_profile):
        """Test ancestor order and depth bound."""
        chain = await build_chain(make_profile, ["a", "b", "c", "d", "e"])
        tree = ReferralTree(session)

        ancestors = await tree.ancestors_up_to(chain[-1].id, 3)

        assert [p.user_id for p in ancestors] == ["d", "c", "b"]
        assert await tree.ancestors_up_to(chain[-1].id, 0) == []
        assert await tree.ancestors_up_to(chain[0].id, 3) == []

    @pytest.mark.asyncio
    async def test_cycle_terminates(self, session, make_profile):
        """Test a corrupted cyclic tree is cut at the first repeat."""
        a, b = await build_chain(make_profile, ["a", "b"])
        a.invited_by = b.id
        await session.commit()

        tree = ReferralTree(session)
        ancestors = await tree.ancestors_up_to(b.id, 3)

        assert [p.user_id for p in ancestors] == ["a"]

        result = await CommissionDistributor(session).distribute(
            "b", Decimal("1")
        )
        assert result.credits_count == 1

    @pytest.mark.asyncio
    async def test_would_create_cycle(self, session, make_profile):
        """Test cycle detection for a proposed inviter edge."""
        a, b, c = await build_chain(make_profile, ["a", "b", "c"])
        tree = ReferralTree(session)

        assert await tree.would_create_cycle(a.id, c.id) is True
        assert await tree.would_create_cycle(a.id, a.id) is True
        assert await tree.would_create_cycle(c.id, a.id) is False

    @pytest.mark.asyncio
    async def test_team_by_tier(self, session, make_profile):
        """Test downline grouped by tier."""
        a = await make_profile("a")
        b = await make_profile("b", inviter=a)
        await make_profile("c", inviter=a)
        d = await make_profile("d", inviter=b)
        e = await make_profile("e", inviter=d)
        await make_profile("f", inviter=e)

        team = await ReferralTree(session).team_by_tier(a.id)

        assert sorted(p.user_id for p in team[1]) == ["b", "c"]
        assert [p.user_id for p in team[2]] == ["d"]
        assert [p.user_id for p in team[3]] == ["e"]
        assert 4 not in team

    @pytest.mark.asyncio
    async def test_count_team_at_level(self, session, make_profile):
        """Test only direct invitees at the level are counted."""
        a = await make_profile("a")
        b = await make_profile("b", inviter=a, level=1)
        await make_profile("c", inviter=a, level=0)
        await make_profile("d", inviter=b, level=2)

        tree = ReferralTree(session)

        assert await tree.count_team_at_level(a.id, 1) == 1
        assert await tree.count_team_at_level(a.id, 0) == 2
        assert [p.user_id for p in await tree.direct_children(b.id)] == ["d"]


class TestTeamReport:
    """Team statistics."""

    @pytest.mark.asyncio
    async def test_report(self, session, make_profile):
        """Test members and commission per tier."""
        a = await make_profile("a")
        b = await make_profile("b", inviter=a, level=1)
        await make_profile("c", inviter=b)

        distributor = CommissionDistributor(session)
        await distributor.distribute("c", Decimal("1"))
        await session.commit()

        report = await TeamStatistics(session).get_team_report("a")

        assert report.total_members == 2
        assert [t.members for t in report.tiers] == [1, 1, 0]
        assert report.tiers[0].active_members == 1
        assert report.tiers[1].commission == Decimal("0.02")
        assert report.total_commission == Decimal("0.02")
