"""
Task completion service.

Records completed tasks against the daily quota and credits the reward to
the user and the team commission to their inviter chain, all in one
database transaction.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.levels import (
    get_max_tasks,
    get_reward_per_task,
    is_weekend,
)
from taskminer.models.task_completion import TaskCompletion
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from taskminer.services.balance.ledger import BalanceLedger
from taskminer.services.referral.commission_distributor import (
    CommissionDistributor,
    DistributionResult,
)
from taskminer.utils.datetime_utils import task_today
from taskminer.utils.db_decorators import transactional
from taskminer.utils.exceptions import NotFoundError, QuotaExceededError


@dataclass
class TaskCompletionResult:
    """Outcome of one completed task."""

    user_id: str
    task_date: date
    tasks_completed: int
    quota: int
    reward: Decimal
    earnings_today: Decimal
    commission: DistributionResult

    @property
    def remaining(self) -> int:
        """Tasks left for the day."""
        return max(self.quota - self.tasks_completed, 0)


@dataclass
class TaskProgress:
    """Task progress of a user for one day."""

    user_id: str
    task_date: date
    completed: int
    quota: int
    earnings: Decimal
    reward_per_task: Decimal
    is_weekend: bool

    @property
    def remaining(self) -> int:
        """Tasks left for the day."""
        return max(self.quota - self.completed, 0)

    @property
    def is_done(self) -> bool:
        """All tasks of the day completed."""
        return self.completed >= self.quota


class TaskCompletionService:
    """Daily task quota and reward crediting."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize task completion service.

        Args:
            session: Async database session
        """
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.completion_repo = TaskCompletionRepository(session)
        self.ledger = BalanceLedger(session)
        self.distributor = CommissionDistributor(session)

    @transactional
    async def complete_task(
        self, user_id: str, day: date | None = None
    ) -> TaskCompletionResult:
        """
        Record one completed task.

        The profile row lock serializes completions of one user, and the
        conditional counter update enforces the quota even without it.

        Args:
            user_id: Auth user ID
            day: Task day (default: current task day)

        Returns:
            TaskCompletionResult

        Raises:
            NotFoundError: User has no profile
            QuotaExceededError: Daily quota already reached
            InconsistentStateError: A balance credit did not apply
        """
        task_date = day or task_today()

        profile = await self.profile_repo.lock_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)

        quota = get_max_tasks(profile.level, profile.is_vip, task_date)
        reward = get_reward_per_task(profile.level, profile.is_vip)

        record = await self._get_or_create_day(user_id, task_date)

        if not await self.completion_repo.increment_if_below(
            record.id, quota, reward
        ):
            logger.info(
                "Task quota reached",
                extra={
                    "user_id": user_id,
                    "task_date": task_date.isoformat(),
                    "quota": quota,
                },
            )
            raise QuotaExceededError(
                user_id=user_id, task_date=task_date.isoformat(), quota=quota
            )

        await self.ledger.credit_many(
            profile.id,
            {
                "available_balance": reward,
                "total_balance": reward,
                "today_commission": reward,
                "total_revenue": reward,
            },
        )

        commission = await self.distributor.distribute(user_id, reward)

        record = await self.completion_repo.get_for_day(user_id, task_date)

        logger.info(
            "Task completed",
            extra={
                "user_id": user_id,
                "task_date": task_date.isoformat(),
                "tasks_completed": record.tasks_completed,
                "quota": quota,
                "reward": str(reward),
                "commission_total": str(commission.total_distributed),
            },
        )

        return TaskCompletionResult(
            user_id=user_id,
            task_date=task_date,
            tasks_completed=record.tasks_completed,
            quota=quota,
            reward=reward,
            earnings_today=record.earnings,
            commission=commission,
        )

    async def _get_or_create_day(
        self, user_id: str, task_date: date
    ) -> TaskCompletion:
        """
        Get the day record or create an empty one.

        Creation races are excluded by the profile lock. A unique-constraint
        conflict on backends without row locks surfaces as a retryable error.
        """
        record = await self.completion_repo.get_for_day(user_id, task_date)
        if record:
            return record
        return await self.completion_repo.create(
            user_id=user_id,
            task_date=task_date,
            tasks_completed=0,
            earnings=Decimal("0"),
        )

    async def get_progress(
        self, user_id: str, day: date | None = None
    ) -> TaskProgress:
        """
        Get task progress of a user.

        Args:
            user_id: Auth user ID
            day: Task day (default: current task day)

        Returns:
            TaskProgress
        """
        task_date = day or task_today()

        profile = await self.profile_repo.get_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)

        record = await self.completion_repo.get_for_day(user_id, task_date)

        return TaskProgress(
            user_id=user_id,
            task_date=task_date,
            completed=record.tasks_completed if record else 0,
            quota=get_max_tasks(profile.level, profile.is_vip, task_date),
            earnings=record.earnings if record else Decimal("0"),
            reward_per_task=get_reward_per_task(
                profile.level, profile.is_vip
            ),
            is_weekend=is_weekend(task_date),
        )

    async def get_history(
        self, user_id: str, limit: int = 30
    ) -> list[TaskCompletion]:
        """Get recent task days of a user, newest first."""
        return await self.completion_repo.get_history(user_id, limit)
