"""
Referral tree module.

The tree is implicit over Profile.invited_by edges. Every walk is depth
bounded so it terminates even if a cycle slipped into the data.
"""

from loguru import logger
from sqlalchemy import Integer, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from taskminer.config.business_constants import (
    MAX_TREE_DEPTH,
    REFERRAL_DEPTH,
    VIP_TEAM_MIN_LEVEL,
)
from taskminer.models.profile import Profile
from taskminer.repositories.profile_repository import ProfileRepository


class ReferralTree:
    """Bounded ancestor/descendant queries over the invite tree."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral tree."""
        self.session = session
        self.profile_repo = ProfileRepository(session)

    async def ancestor_ids_up_to(
        self, profile_id: int, depth: int = REFERRAL_DEPTH
    ) -> list[int]:
        """
        Get inviter chain IDs (recursive CTE).

        Args:
            profile_id: Starting profile ID
            depth: Number of hops to walk

        Returns:
            Profile IDs from direct inviter up to ``depth`` hops, nearest first
        """
        depth = min(depth, MAX_TREE_DEPTH)
        if depth <= 0:
            return []

        chain = (
            select(
                Profile.id.label("id"),
                Profile.invited_by.label("invited_by"),
                literal_column("0", Integer).label("hop"),
            )
            .where(Profile.id == profile_id)
            .cte("inviter_chain", recursive=True)
        )
        inviter = aliased(Profile)
        chain = chain.union_all(
            select(
                inviter.id,
                inviter.invited_by,
                chain.c.hop + 1,
            ).where(
                inviter.id == chain.c.invited_by,
                chain.c.hop < depth,
            )
        )

        stmt = (
            select(chain.c.id, chain.c.hop)
            .where(chain.c.hop > 0)
            .order_by(chain.c.hop.asc())
        )
        result = await self.session.execute(stmt)
        rows = result.all()

        # Cut the walk at the first repeat: the data contains a cycle
        seen = {profile_id}
        ancestor_ids = []
        for row in rows:
            if row.id in seen:
                logger.warning(
                    "Referral cycle detected",
                    extra={
                        "profile_id": profile_id,
                        "repeated_id": row.id,
                        "chain_ids": ancestor_ids,
                    },
                )
                break
            seen.add(row.id)
            ancestor_ids.append(row.id)

        return ancestor_ids

    async def ancestors_up_to(
        self, profile_id: int, depth: int = REFERRAL_DEPTH
    ) -> list[Profile]:
        """
        Get inviter chain profiles, nearest first.

        Args:
            profile_id: Starting profile ID
            depth: Number of hops to walk

        Returns:
            List of at most ``depth`` profiles
        """
        ancestor_ids = await self.ancestor_ids_up_to(profile_id, depth)
        profiles = await self.profile_repo.get_by_ids(ancestor_ids)
        return [profiles[i] for i in ancestor_ids if i in profiles]

    async def direct_children(self, profile_id: int) -> list[Profile]:
        """Get profiles directly invited by a profile."""
        return await self.profile_repo.get_children(profile_id)

    async def count_team_at_level(
        self, profile_id: int, min_level: int = VIP_TEAM_MIN_LEVEL
    ) -> int:
        """
        Count direct invitees that reached a level (VIP eligibility).

        Args:
            profile_id: Inviter profile ID
            min_level: Minimum level (inclusive)

        Returns:
            Number of qualifying direct invitees
        """
        return await self.profile_repo.count_children_at_level(
            profile_id, min_level
        )

    async def team_by_tier(
        self, profile_id: int, depth: int = REFERRAL_DEPTH
    ) -> dict[int, list[Profile]]:
        """
        Get downline grouped by tier (1 = direct invitees).

        Breadth-first, one query per tier.

        Args:
            profile_id: Root profile ID
            depth: Number of tiers

        Returns:
            Dict mapping tier to list of profiles (every tier present)
        """
        depth = min(depth, MAX_TREE_DEPTH)
        tiers: dict[int, list[Profile]] = {tier: [] for tier in range(1, depth + 1)}

        visited = {profile_id}
        frontier = [profile_id]
        for tier in range(1, depth + 1):
            if not frontier:
                break
            children = await self.profile_repo.get_children_of_many(frontier)
            fresh = [child for child in children if child.id not in visited]
            visited.update(child.id for child in fresh)
            tiers[tier] = fresh
            frontier = [child.id for child in fresh]

        return tiers

    async def would_create_cycle(
        self, profile_id: int, inviter_id: int
    ) -> bool:
        """
        Check if linking a profile under an inviter would create a cycle.

        Args:
            profile_id: Profile that gets an inviter
            inviter_id: Proposed inviter profile ID

        Returns:
            True if the profile is the inviter or one of its ancestors
        """
        if profile_id == inviter_id:
            return True
        chain = await self.ancestor_ids_up_to(inviter_id, MAX_TREE_DEPTH)
        return profile_id in chain
