"""
Task completion model.

One row per user and task day.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from taskminer.models.base import Base
from taskminer.models.types import MoneyType


class TaskCompletion(Base):
    """Tasks completed and earnings accrued by a user on one task day."""

    __tablename__ = "task_completions"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "task_date", name="uq_task_completion_user_day"
        ),
        CheckConstraint(
            "tasks_completed >= 0",
            name="check_task_completion_count_non_negative",
        ),
        CheckConstraint(
            "earnings >= 0", name="check_task_completion_earnings_non_negative"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.user_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    task_date: Mapped[date] = mapped_column(Date, nullable=False)

    tasks_completed: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TaskCompletion(user_id={self.user_id}, day={self.task_date}, "
            f"tasks={self.tasks_completed})>"
        )
