"""
Commission distributor.

Pays team commission to the inviter chain of a user who earned a task
reward: 3% / 2% / 1% for tiers 1-3. Runs inside the caller's transaction
and never commits, so a failed ancestor credit rolls back the whole task.
"""

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.business_constants import COMMISSION_RATES, REFERRAL_DEPTH
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.services.balance.ledger import BalanceLedger
from taskminer.services.referral.tree import ReferralTree
from taskminer.utils.exceptions import NotFoundError, ValidationError

# Storage precision of money columns
MONEY_QUANT = Decimal("0.00000001")


@dataclass
class CommissionCredit:
    """Commission paid to one ancestor."""

    profile_id: int
    user_id: str
    tier: int
    amount: Decimal


@dataclass
class DistributionResult:
    """Result of commission distribution."""

    earning_user_id: str
    task_reward: Decimal
    total_distributed: Decimal = Decimal("0")
    credits: list[CommissionCredit] = field(default_factory=list)

    @property
    def credits_count(self) -> int:
        """Number of ancestors credited."""
        return len(self.credits)


def calculate_commission(task_reward: Decimal, tier: int) -> Decimal:
    """
    Calculate commission for a tier.

    Args:
        task_reward: Reward earned by the downline user
        tier: Tier (1 = direct inviter)

    Returns:
        Commission amount (0 for tiers without a rate)
    """
    rate = COMMISSION_RATES.get(tier)
    if rate is None:
        return Decimal("0")
    return (task_reward * rate).quantize(MONEY_QUANT, rounding=ROUND_DOWN)


class CommissionDistributor:
    """Credits team commission up the referral chain."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize commission distributor.

        Args:
            session: Async database session (owned by the caller)
        """
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.tree = ReferralTree(session)
        self.ledger = BalanceLedger(session)

    async def distribute(
        self, earning_user_id: str, task_reward: Decimal
    ) -> DistributionResult:
        """
        Distribute commission for a task reward.

        A chain shorter than three tiers is not an error: missing tiers are
        simply not paid.

        Args:
            earning_user_id: User who completed the task
            task_reward: Reward credited for the task

        Returns:
            DistributionResult with per-tier credits

        Raises:
            ValidationError: Non-positive reward
            NotFoundError: Earning user has no profile
            InconsistentStateError: An ancestor credit did not apply
        """
        if not isinstance(task_reward, Decimal) or task_reward <= 0:
            raise ValidationError(
                "Task reward must be positive", task_reward=str(task_reward)
            )

        profile = await self.profile_repo.get_by_user_id(earning_user_id)
        if not profile:
            raise NotFoundError(
                "Profile not found", user_id=earning_user_id
            )

        result = DistributionResult(
            earning_user_id=earning_user_id, task_reward=task_reward
        )

        ancestors = await self.tree.ancestors_up_to(profile.id, REFERRAL_DEPTH)
        for tier, ancestor in enumerate(ancestors, start=1):
            amount = calculate_commission(task_reward, tier)
            if amount <= 0:
                continue

            await self.ledger.credit_many(
                ancestor.id,
                {
                    "total_commission": amount,
                    "total_balance": amount,
                    "available_balance": amount,
                    f"level{tier}_commission": amount,
                },
            )

            result.credits.append(
                CommissionCredit(
                    profile_id=ancestor.id,
                    user_id=ancestor.user_id,
                    tier=tier,
                    amount=amount,
                )
            )
            result.total_distributed += amount

        logger.info(
            "Team commission distributed",
            extra={
                "earning_user_id": earning_user_id,
                "task_reward": str(task_reward),
                "total_distributed": str(result.total_distributed),
                "credits_count": result.credits_count,
            },
        )

        return result
