"""
VIP service.

A profile becomes VIP once enough of its direct invitees reached LV1.
The upgrade is one-way.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.business_constants import (
    VIP_REQUIREMENTS,
    VIP_TEAM_MIN_LEVEL,
)
from taskminer.models.profile import Profile
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.services.referral.tree import ReferralTree
from taskminer.utils.db_decorators import transactional
from taskminer.utils.exceptions import NotFoundError


def required_team_size(level: int) -> int:
    """Get the number of LV1+ direct invitees needed for VIP at a level."""
    return VIP_REQUIREMENTS.get(level, max(VIP_REQUIREMENTS.values()))


class VipService:
    """VIP eligibility and upgrade."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize VIP service."""
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.tree = ReferralTree(session)

    async def _is_eligible(self, profile: Profile) -> bool:
        if profile.is_vip:
            return True
        team = await self.tree.count_team_at_level(
            profile.id, VIP_TEAM_MIN_LEVEL
        )
        return team >= required_team_size(profile.level)

    async def check_vip_eligibility(self, user_id: str) -> bool:
        """
        Check if user qualifies for VIP.

        Args:
            user_id: Auth user ID

        Returns:
            True if already VIP or the team requirement is met
        """
        profile = await self.profile_repo.get_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)
        return await self._is_eligible(profile)

    @transactional
    async def upgrade_to_vip(self, user_id: str) -> bool:
        """
        Upgrade user to VIP if eligible.

        Args:
            user_id: Auth user ID

        Returns:
            True if the user is VIP afterwards
        """
        profile = await self.profile_repo.lock_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)

        if profile.is_vip:
            return True

        if not await self._is_eligible(profile):
            logger.info(
                "VIP upgrade refused, team requirement not met",
                extra={
                    "user_id": user_id,
                    "level": profile.level,
                    "required": required_team_size(profile.level),
                },
            )
            return False

        profile.is_vip = True
        await self.session.flush()

        logger.info(
            "User upgraded to VIP",
            extra={"user_id": user_id, "level": profile.level},
        )
        return True
