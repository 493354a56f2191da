"""
Contract service.

The first approved deposit starts a one-year contract. Time bonuses are
unlocked after 2, 5, 8 and 12 months worked.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.business_constants import (
    CONTRACT_DURATION_DAYS,
    TIME_BONUSES,
)
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.utils.datetime_utils import as_utc, utc_now
from taskminer.utils.exceptions import NotFoundError

DAYS_PER_MONTH = 30


@dataclass
class BonusMilestone:
    """Time bonus unlocked after a number of months."""

    months: int
    amount: Decimal
    reached: bool


@dataclass
class ContractStatus:
    """Contract countdown of a user."""

    user_id: str
    start_date: datetime | None
    end_date: datetime | None
    days_elapsed: int = 0
    days_remaining: int = 0
    months_worked: int = 0
    milestones: list[BonusMilestone] = field(default_factory=list)

    @property
    def is_started(self) -> bool:
        """Contract started (first deposit approved)."""
        return self.start_date is not None

    @property
    def is_expired(self) -> bool:
        """Contract term is over."""
        return self.is_started and self.days_remaining == 0


def build_milestones(level: int, months_worked: int) -> list[BonusMilestone]:
    """
    Build time bonus milestones for a level.

    Args:
        level: Current level (LV0 has no bonuses)
        months_worked: Full months since contract start

    Returns:
        Milestones ordered by months
    """
    return [
        BonusMilestone(
            months=months,
            amount=bonuses.get(level, Decimal("0")),
            reached=months_worked >= months,
        )
        for months, bonuses in sorted(TIME_BONUSES.items())
    ]


class ContractService:
    """Contract countdown and time bonuses."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize contract service."""
        self.session = session
        self.profile_repo = ProfileRepository(session)

    async def get_contract_status(
        self, user_id: str, now: datetime | None = None
    ) -> ContractStatus:
        """
        Get contract status of a user.

        Args:
            user_id: Auth user ID
            now: Reference moment (default: now)

        Returns:
            ContractStatus (not started when no deposit was approved yet)
        """
        profile = await self.profile_repo.get_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)

        if profile.contract_start_date is None:
            return ContractStatus(
                user_id=user_id,
                start_date=None,
                end_date=None,
                milestones=build_milestones(profile.level, 0),
            )

        now = as_utc(now) if now else utc_now()
        start = as_utc(profile.contract_start_date)
        end = start + timedelta(days=CONTRACT_DURATION_DAYS)

        days_elapsed = min(
            max((now - start).days, 0), CONTRACT_DURATION_DAYS
        )
        months_worked = days_elapsed // DAYS_PER_MONTH

        return ContractStatus(
            user_id=user_id,
            start_date=start,
            end_date=end,
            days_elapsed=days_elapsed,
            days_remaining=CONTRACT_DURATION_DAYS - days_elapsed,
            months_worked=months_worked,
            milestones=build_milestones(profile.level, months_worked),
        )
