"""
Team statistics module.

Builds the "my team" report: members per tier and commission earned from
each tier.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.business_constants import REFERRAL_DEPTH, VIP_TEAM_MIN_LEVEL
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.services.referral.tree import ReferralTree
from taskminer.utils.exceptions import NotFoundError


@dataclass
class TierSummary:
    """Members and commission of one tier."""

    tier: int
    members: int
    active_members: int
    commission: Decimal


@dataclass
class TeamReport:
    """Team report of a user."""

    user_id: str
    total_members: int
    total_commission: Decimal
    today_commission: Decimal
    tiers: list[TierSummary] = field(default_factory=list)


class TeamStatistics:
    """Team statistics for the team page."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize team statistics."""
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.tree = ReferralTree(session)

    async def get_team_report(self, user_id: str) -> TeamReport:
        """
        Get team report for user.

        A member is active once they reached level 1 (made a deposit).

        Args:
            user_id: Auth user ID

        Returns:
            TeamReport with tiers 1..3
        """
        profile = await self.profile_repo.get_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)
        profile = await self.profile_repo.refresh_by_id(profile.id)

        team = await self.tree.team_by_tier(profile.id, REFERRAL_DEPTH)

        tiers = []
        for tier, members in sorted(team.items()):
            tiers.append(
                TierSummary(
                    tier=tier,
                    members=len(members),
                    active_members=sum(
                        1 for m in members if m.level >= VIP_TEAM_MIN_LEVEL
                    ),
                    commission=getattr(profile, f"level{tier}_commission"),
                )
            )

        return TeamReport(
            user_id=user_id,
            total_members=sum(t.members for t in tiers),
            total_commission=profile.total_commission,
            today_commission=profile.today_commission,
            tiers=tiers,
        )
