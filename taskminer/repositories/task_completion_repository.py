"""
Task completion repository.

Data access layer for TaskCompletion model.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.task_completion import TaskCompletion
from taskminer.repositories.base import BaseRepository
from taskminer.utils.datetime_utils import utc_now


class TaskCompletionRepository(BaseRepository[TaskCompletion]):
    """Task completion repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task completion repository."""
        super().__init__(TaskCompletion, session)

    async def get_for_day(
        self, user_id: str, task_date: date
    ) -> TaskCompletion | None:
        """
        Get the completion record of a user for a task day.

        Args:
            user_id: Auth user ID
            task_date: Task day

        Returns:
            TaskCompletion or None
        """
        stmt = (
            select(TaskCompletion)
            .where(
                TaskCompletion.user_id == user_id,
                TaskCompletion.task_date == task_date,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_if_below(
        self, record_id: int, quota: int, reward: Decimal
    ) -> bool:
        """
        Atomically record one more completed task unless the quota is reached.

        Args:
            record_id: TaskCompletion ID
            quota: Task quota for the day
            reward: Reward added to earnings

        Returns:
            True if the row was updated, False if the quota was reached
        """
        stmt = (
            update(TaskCompletion)
            .where(
                TaskCompletion.id == record_id,
                TaskCompletion.tasks_completed < quota,
            )
            .values(
                tasks_completed=TaskCompletion.tasks_completed + 1,
                earnings=TaskCompletion.earnings + reward,
                completed_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def get_history(
        self, user_id: str, limit: int = 30
    ) -> list[TaskCompletion]:
        """
        Get recent completion records, newest day first.

        Args:
            user_id: Auth user ID
            limit: Max number of days

        Returns:
            List of completion records
        """
        stmt = (
            select(TaskCompletion)
            .where(TaskCompletion.user_id == user_id)
            .order_by(TaskCompletion.task_date.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
