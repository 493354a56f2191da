"""
Profile repository.

Data access layer for Profile model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.profile import Profile
from taskminer.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Profile repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize profile repository."""
        super().__init__(Profile, session)

    async def get_by_user_id(self, user_id: str) -> Profile | None:
        """
        Get profile by external user ID.

        Args:
            user_id: Auth user ID

        Returns:
            Profile or None
        """
        return await self.get_by(user_id=user_id)

    async def get_by_invite_code(self, invite_code: str) -> Profile | None:
        """
        Get profile by invite code.

        Args:
            invite_code: Normalized (upper-case) invite code

        Returns:
            Profile or None
        """
        return await self.get_by(invite_code=invite_code)

    async def lock_by_user_id(self, user_id: str) -> Profile | None:
        """
        Get profile by user ID with a row lock.

        Args:
            user_id: Auth user ID

        Returns:
            Locked profile or None
        """
        return await self.get_for_update(user_id=user_id)

    async def refresh_by_id(self, profile_id: int) -> Profile | None:
        """
        Re-read a profile, overwriting any stale in-session state.

        Args:
            profile_id: Profile ID

        Returns:
            Profile with latest committed values or None
        """
        stmt = (
            select(Profile)
            .where(Profile.id == profile_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, profile_ids: list[int]) -> dict[int, Profile]:
        """
        Get profiles by IDs in a single query.

        Args:
            profile_ids: Profile IDs

        Returns:
            Dict mapping profile ID to profile
        """
        if not profile_ids:
            return {}
        stmt = select(Profile).where(Profile.id.in_(profile_ids))
        result = await self.session.execute(stmt)
        return {profile.id: profile for profile in result.scalars().all()}

    async def get_emails_by_user_ids(
        self, user_ids: list[str]
    ) -> dict[str, str | None]:
        """
        Get emails for a set of users in a single query.

        Args:
            user_ids: Auth user IDs

        Returns:
            Dict mapping user ID to email
        """
        if not user_ids:
            return {}
        stmt = select(Profile.user_id, Profile.email).where(
            Profile.user_id.in_(user_ids)
        )
        result = await self.session.execute(stmt)
        return {row.user_id: row.email for row in result.all()}

    async def list_all(self) -> list[Profile]:
        """
        Get all profiles, newest first.

        Returns:
            List of profiles
        """
        stmt = select(Profile).order_by(Profile.created_at.desc(), Profile.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_children(self, profile_id: int) -> list[Profile]:
        """
        Get profiles directly invited by a profile.

        Args:
            profile_id: Inviter profile ID

        Returns:
            List of invitees, oldest first
        """
        stmt = (
            select(Profile)
            .where(Profile.invited_by == profile_id)
            .order_by(Profile.created_at.asc(), Profile.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_children_of_many(
        self, profile_ids: list[int]
    ) -> list[Profile]:
        """
        Get profiles directly invited by any of the given profiles.

        Args:
            profile_ids: Inviter profile IDs

        Returns:
            List of invitees
        """
        if not profile_ids:
            return []
        stmt = (
            select(Profile)
            .where(Profile.invited_by.in_(profile_ids))
            .order_by(Profile.created_at.asc(), Profile.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_children_at_level(
        self, profile_id: int, min_level: int
    ) -> int:
        """
        Count direct invitees that reached a level.

        Args:
            profile_id: Inviter profile ID
            min_level: Minimum level (inclusive)

        Returns:
            Count of invitees
        """
        stmt = select(func.count(Profile.id)).where(
            Profile.invited_by == profile_id,
            Profile.level >= min_level,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0
